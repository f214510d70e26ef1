"""
app/schemas/connector.py

Request schemas for the host connector protocol.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from app.domain import DateRange
from app.services.connector_service import DataRequest


class _HostModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class RequestedField(_HostModel):
    name: str = Field(..., min_length=1)


class ConfigParams(_HostModel):
    magento_base_url: str | None = Field(default=None, alias="magentoBaseUrl")
    api_token: str | None = Field(default=None, alias="apiToken")


class DateRangeParams(_HostModel):
    start_date: str = Field(..., alias="startDate")
    end_date: str | None = Field(default=None, alias="endDate")


class SchemaRequest(_HostModel):
    """
    Body of a `getSchema` call; the schema does not depend on it.
    """

    config_params: ConfigParams | None = Field(default=None, alias="configParams")


class DataRequestBody(_HostModel):
    """
    Body of a `getData` call.
    """

    fields: list[RequestedField] = Field(default_factory=list)
    config_params: ConfigParams = Field(default_factory=ConfigParams, alias="configParams")
    date_range: DateRangeParams = Field(..., alias="dateRange")
    user_email: str | None = Field(default=None, alias="userEmail")

    def to_data_request(self) -> DataRequest:
        return DataRequest(
            field_ids=tuple(field.name for field in self.fields),
            base_url=self.config_params.magento_base_url,
            api_token=self.config_params.api_token,
            date_range=DateRange(start=self.date_range.start_date, end=self.date_range.end_date),
            user_email=self.user_email,
        )
