from pydantic import BaseModel, Field
from typing import Optional, List, Union
from datetime import datetime
from .models import UserRole
from .units import UnitSystem

# Dimensions arrive as typed by the user; unparsable strings count as zero
NumberInput = Union[float, str, None]


class Point(BaseModel):
    x: float
    y: float
    id: Optional[int] = None


class ProjectData(BaseModel):
    points: List[Point] = []
    scale: float = Field(15.0, gt=0)
    is_closed: bool = False
    unit_system: UnitSystem = UnitSystem.SI


class ProjectCreate(BaseModel):
    name: str
    data: ProjectData


class MaterialConfig(BaseModel):
    cement_kg_per_m3: Optional[float] = None
    sand_m3_per_m3: Optional[float] = None
    gravel_m3_per_m3: Optional[float] = None
    water_l_per_m3: Optional[float] = None
    steel_kg_per_m3_min: Optional[float] = None
    steel_kg_per_m3_max: Optional[float] = None
    cost_concrete_per_m3: Optional[float] = None
    cost_steel_per_kg: Optional[float] = None


class MaterialPresetUpdate(MaterialConfig):
    notes: Optional[str] = None


class MaterialPreset(BaseModel):
    id: int
    name: str
    cement_kg_per_m3: float
    sand_m3_per_m3: float
    gravel_m3_per_m3: float
    water_l_per_m3: float
    steel_kg_per_m3_min: float
    steel_kg_per_m3_max: float
    cost_concrete_per_m3: float
    cost_steel_per_kg: float
    notes: Optional[str] = None
    updated_at: datetime
    class Config:
        from_attributes = True


class EstimateRequest(BaseModel):
    mode: str = "slab"  # 'slab' | 'box'
    # Falls back to geometry.unit_system, then SI
    unit_system: Optional[UnitSystem] = None
    geometry: Optional[ProjectData] = None
    area_m2: NumberInput = None
    thickness: NumberInput = None
    length: NumberInput = None
    width: NumberInput = None
    height: NumberInput = None
    preset: str = "default"
    config: Optional[MaterialConfig] = None
    lang: Optional[str] = None
    project_name: Optional[str] = None


class MeasureRequest(ProjectData):
    pass


class RoleUpdate(BaseModel):
    role: UserRole


class ContactMessage(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    subject: Optional[str] = None
    message: Optional[str] = None
