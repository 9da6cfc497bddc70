# app/domain/enums.py
from enum import Enum


class ColorEnum(str, Enum):
    RED = "red"
    BLUE = "blue"
    GREEN = "green"
    BLACK = "black"
    WHITE = "white"
    YELLOW = "yellow"
    PINK = "pink"
    GREY = "grey"
    BROWN = "brown"
    PURPLE = "purple"
    ORANGE = "orange"
    BEIGE = "beige"


class SizeEnum(str, Enum):
    XS = "XS"
    S = "S"
    M = "M"
    L = "L"
    XL = "XL"
    XXL = "XXL"
