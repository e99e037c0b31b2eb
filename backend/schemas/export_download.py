from pydantic import BaseModel, model_validator
from datetime import date, datetime

from utils.export_utils import ExportFormat, ExportType


class ExportDescriptorRequest(BaseModel):
    export_type: ExportType
    export_format: ExportFormat
    start_date: date
    end_date: date

    @model_validator(mode='after')
    def check_date_range(self):
        if self.start_date > self.end_date:
            raise ValueError('start_date cannot be after end_date')
        return self


class ExportDescriptorResponse(BaseModel):
    file_name: str
    mime_type: str
    token: str
    expiration: datetime
