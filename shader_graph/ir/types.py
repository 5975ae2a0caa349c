from enum import Enum, auto


class DataType(Enum):
    FLOAT = auto()
    VEC2 = auto()
    VEC3 = auto()
    VEC4 = auto()

    @classmethod
    def from_name(cls, name: str) -> "DataType":
        """Parse a GLSL type name ('float', 'vec3', ...)."""
        try:
            return cls[str(name).strip().upper()]
        except KeyError:
            raise ValueError(f"Unsupported socket type: {name!r}") from None

    @classmethod
    def for_components(cls, count: int) -> "DataType":
        return {1: cls.FLOAT, 2: cls.VEC2, 3: cls.VEC3, 4: cls.VEC4}[count]

    def is_vector(self):
        return self in {DataType.VEC2, DataType.VEC3, DataType.VEC4}

    def is_scalar(self):
        return self is DataType.FLOAT

    def component_count(self):
        if self is DataType.VEC2: return 2
        if self is DataType.VEC3: return 3
        if self is DataType.VEC4: return 4
        return 1

    @property
    def glsl(self) -> str:
        return self.name.lower()

    def zero_literal(self) -> str:
        if self is DataType.FLOAT:
            return "0.0"
        return f"{self.glsl}(0.0)"

    def __str__(self):
        return self.name.lower()
