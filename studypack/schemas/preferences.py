from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict

Theme = Literal["default", "emerald", "rose", "amber", "ocean"]
Font = Literal["Inter", "Playfair Display", "JetBrains Mono", "Quicksand"]
Shape = Literal["sharp", "default", "rounded"]


class Preferences(BaseModel):
    theme: Theme = "default"
    font: Font = "Inter"
    shape: Shape = "default"


class PreferencesUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    theme: Optional[Theme] = None
    font: Optional[Font] = None
    shape: Optional[Shape] = None
