from .converter import OCDGConverter
