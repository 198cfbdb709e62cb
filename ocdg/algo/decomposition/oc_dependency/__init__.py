from .algorithm import apply
