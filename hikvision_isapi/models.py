from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict, dataclass, field
from enum import StrEnum
from typing import Any

import voluptuous as vol

from .config import DEVICE_SCHEMA, GLOBAL_SCHEMA
from .const import DEFAULT_LOGGING, DEFAULT_PORT, DEFAULT_PROTOCOL, DEFAULT_TIMEOUT, DEFAULT_VERIFY_SSL, Format
from .exceptions import ISAPIConfigError, ISAPIInvalidDeviceConfigError
from .utils import str_to_bool


@dataclass(frozen=True)
class DeviceConfig:
    """Holds connection settings of a single terminal."""

    host: str
    username: str = ""
    password: str = ""
    port: int = DEFAULT_PORT
    protocol: str = DEFAULT_PROTOCOL
    timeout: int = DEFAULT_TIMEOUT
    verify_ssl: bool = DEFAULT_VERIFY_SSL

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | DeviceConfig, name: str | None = None) -> DeviceConfig:
        """Validate a device record and coerce its fields."""
        if isinstance(data, DeviceConfig):
            return data
        try:
            validated = DEVICE_SCHEMA(data)
        except vol.Invalid as ex:
            raise ISAPIInvalidDeviceConfigError(
                f"Configuration for device '{name}' is invalid or missing: {ex}", name
            ) from ex
        return cls(**validated)

    def as_dict(self) -> dict[str, Any]:
        """Return the record as a plain dict."""
        return asdict(self)


@dataclass(frozen=True)
class GlobalConfig:
    """Holds settings shared by all devices of a provider."""

    format: Format = Format.JSON
    logging: Mapping[str, Any] = field(default_factory=lambda: dict(DEFAULT_LOGGING))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | GlobalConfig | None) -> GlobalConfig:
        """Validate global settings."""
        if isinstance(data, GlobalConfig):
            return data
        try:
            validated = GLOBAL_SCHEMA(dict(data or {}))
        except vol.Invalid as ex:
            raise ISAPIConfigError(f"Invalid global configuration: {ex}") from ex
        return cls(format=Format(validated["format"]), logging=validated["logging"])


@dataclass(frozen=True)
class DeviceContext:
    """Device configuration merged with global settings."""

    name: str
    device: DeviceConfig
    settings: GlobalConfig = field(default_factory=GlobalConfig)

    @property
    def base_url(self) -> str:
        """Scheme, host and port of the device."""
        return f"{self.device.protocol}://{self.device.host}:{self.device.port}"

    @property
    def default_format(self) -> Format:
        return self.settings.format


class UserType(StrEnum):
    """Person types known to access control terminals."""

    NORMAL = "normal"
    VISITOR = "visitor"
    BLACKLIST = "blackList"


@dataclass
class Person:
    """Holds UserInfo record of an access control terminal."""

    employee_no: str
    name: str
    user_type: UserType = UserType.NORMAL
    valid_enabled: bool = True
    begin_time: str | None = None
    end_time: str | None = None
    door_right: str | None = None
    right_plan: list = field(default_factory=list)
    email: str | None = None
    phone_number: str | None = None
    organization_id: int | None = None
    belong_group: str | None = None
    group_id: int | None = None
    gender: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Build UserInfo payload, unset optional fields are omitted."""
        valid: dict[str, Any] = {"enable": self.valid_enabled}
        if self.begin_time is not None:
            valid["beginTime"] = self.begin_time
        if self.end_time is not None:
            valid["endTime"] = self.end_time

        user_info: dict[str, Any] = {
            "employeeNo": self.employee_no,
            "name": self.name,
            "userType": UserType(self.user_type).value,
            "Valid": valid,
        }
        optional = {
            "doorRight": self.door_right,
            "RightPlan": self.right_plan or None,
            "email": self.email,
            "phoneNumber": self.phone_number,
            "organizationId": self.organization_id,
            "belongGroup": self.belong_group,
            "groupId": self.group_id,
            "gender": self.gender,
        }
        user_info.update({key: value for key, value in optional.items() if value is not None})
        return {"UserInfo": user_info}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Person:
        """Create from UserInfo payload, wrapped or bare."""
        user_info = data.get("UserInfo", data)
        valid = user_info.get("Valid") or {}
        enabled = valid.get("enable", True)
        if isinstance(enabled, str):
            enabled = str_to_bool(enabled)

        return cls(
            employee_no=str(user_info.get("employeeNo", "")),
            name=user_info.get("name", ""),
            user_type=UserType(user_info.get("userType") or UserType.NORMAL),
            valid_enabled=enabled,
            begin_time=valid.get("beginTime"),
            end_time=valid.get("endTime"),
            door_right=user_info.get("doorRight"),
            right_plan=user_info.get("RightPlan") or [],
            email=user_info.get("email"),
            phone_number=user_info.get("phoneNumber"),
            organization_id=user_info.get("organizationId"),
            belong_group=user_info.get("belongGroup"),
            group_id=user_info.get("groupId"),
            gender=user_info.get("gender"),
        )
