from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field, confloat, field_validator

UnitFloat = confloat(ge=0, le=1)


class BBoxAnnotation(BaseModel):
    """Axis aligned box in unit coordinates (x/y is the box center)"""

    type: Literal["bbox"] = "bbox"
    label: str
    x: UnitFloat
    y: UnitFloat
    w: UnitFloat
    h: UnitFloat
    source_file: Optional[str] = None


class PolygonAnnotation(BaseModel):
    """Polygon stored as a flat [x1, y1, x2, y2, ...] list of unit coordinates"""

    type: Literal["polygon"] = "polygon"
    label: Optional[str] = None
    points: List[UnitFloat] = Field(default_factory=list)
    properties: Optional[Dict[str, Any]] = None
    source_file: Optional[str] = None

    @field_validator("points")
    @classmethod
    def validate_pairs(cls, points: List[float]) -> List[float]:
        if len(points) % 2 != 0:
            raise ValueError("Polygon points must come in x, y pairs")
        return points

    def vertices(self) -> List[tuple[float, float]]:
        return list(zip(self.points[0::2], self.points[1::2]))


Annotation = Annotated[
    Union[BBoxAnnotation, PolygonAnnotation], Field(discriminator="type")
]


class AnnotationFile(BaseModel):
    """A named group of annotations loaded from one source file"""

    name: str
    annotations: List[Annotation] = Field(default_factory=list)
    visible: bool = True
    color: str

    def labels(self) -> List[str]:
        """Distinct class labels in first-seen order."""
        seen: List[str] = []
        for annotation in self.annotations:
            if annotation.label is not None and annotation.label not in seen:
                seen.append(annotation.label)
        return seen

    def clone(self) -> "AnnotationFile":
        return self.model_copy(deep=True)
