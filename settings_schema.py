from typing import Literal

from pydantic import BaseModel, Field, ValidationError


class SettingsSchema(BaseModel):
    weight_unit: Literal["kg", "lbs"] = "kg"
    goal_type: Literal["loseFat", "bulkUp", "maintain"] = "maintain"
    body_weight: float = Field(60.0, gt=0)
    default_resistance_mets: float = Field(3.8, gt=0)
    default_aerobic_mets: float = Field(6.0, gt=0)
    rest_seconds: int = Field(30, ge=1)
    language: str = "ja"
    user_id: str = "current_user"
    app_version: str = "1.0.0"


def validate_settings(data: dict) -> None:
    try:
        SettingsSchema(**data)
    except ValidationError as e:
        raise ValueError(str(e))
