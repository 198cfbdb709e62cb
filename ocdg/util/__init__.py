from .errors import OCDGError, DanglingReference, UnknownRelationKind
from .context import RunContext, configure_logging
