from .graph_decomposition import GraphDecomposition, decompose
