"""
Tide Prediction Model
"""
from datetime import datetime

from pydantic import BaseModel, ConfigDict


class TidePrediction(BaseModel):
    """Hourly tide height at the configured NOAA station"""
    model_config = ConfigDict(frozen=True)

    time: datetime  # station local time (lst_ldt)
    height_feet: float
