from .relation_rules import RelationRules, RULES
from .generation import OCDGGeneration
