"""Data models for weighbridge receipts and the receipt template."""

from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import datetime

from .formatting import coerce_number, to_local_input

NUMERIC_FIELDS = ("gross_weight", "tare_weight", "net_weight", "charges")

# Python attribute name -> persisted JSON key
_RECEIPT_KEYS: dict[str, str] = {
    "id": "id",
    "rst_no": "rstNo",
    "vehicle_no": "vehicleNo",
    "customer": "customer",
    "supplier": "supplier",
    "material": "material",
    "gross_weight": "grossWeight",
    "tare_weight": "tareWeight",
    "net_weight": "netWeight",
    "manual_net_weight": "manualNetWeight",
    "date_time_in": "dateTimeIn",
    "date_time_out": "dateTimeOut",
    "charges": "charges",
    "remarks": "remarks",
}

_CONFIG_KEYS: dict[str, str] = {
    "company_name": "companyName",
    "address": "address",
    "footer": "footer",
    "show_charges": "showCharges",
}


@dataclass
class Receipt:
    """A single weighing transaction."""

    id: int | None = None
    rst_no: str = ""
    vehicle_no: str = ""
    customer: str = ""
    supplier: str = ""
    material: str = ""
    gross_weight: int | float = 0
    tare_weight: int | float = 0
    net_weight: int | float = 0
    manual_net_weight: bool = False
    date_time_in: str = ""   # tare weighing, YYYY-MM-DDTHH:MM
    date_time_out: str = ""  # gross weighing
    charges: int | float = 0
    remarks: str = ""

    @property
    def has_negative_net(self) -> bool:
        return self.net_weight < 0

    def to_dict(self) -> dict:
        return {key: getattr(self, attr) for attr, key in _RECEIPT_KEYS.items()}

    @classmethod
    def from_dict(cls, data: dict) -> Receipt:
        """Build a receipt from persisted JSON, tolerating missing keys."""
        kwargs = {}
        for attr, key in _RECEIPT_KEYS.items():
            if key not in data:
                continue
            value = data[key]
            if attr in NUMERIC_FIELDS:
                value = coerce_number(value)
            elif attr == "manual_net_weight":
                value = bool(value)
            elif attr == "id":
                value = int(value) if value is not None else None
            else:
                value = "" if value is None else str(value)
            kwargs[attr] = value
        return cls(**kwargs)


def new_receipt(receipt_id: int | None = None, now: datetime | None = None) -> Receipt:
    """A blank receipt stamped with the current minute for both weighings."""
    stamp = to_local_input(now or datetime.now())
    return Receipt(id=receipt_id, date_time_in=stamp, date_time_out=stamp)


@dataclass
class TemplateConfig:
    """Header and footer text printed on every receipt."""

    company_name: str = "RAJDIP GINNING AND PRESSING PVT LTD"
    address: str = "JUNA BELWANDI KOTHAR ROAD SHRIGONDA\nDIST. AHMEDNAGAR"
    footer: str = (
        "WB BY ROCKWAY WEIGHBRIDGE TECHNO, PUNE. "
        "PH NO: 020-26631444, 9623442386(SERVICE)"
    )
    show_charges: bool = True

    def to_dict(self) -> dict:
        return {key: getattr(self, attr) for attr, key in _CONFIG_KEYS.items()}

    @classmethod
    def from_dict(cls, data: dict) -> TemplateConfig:
        """Overlay persisted values onto the defaults."""
        kwargs = {}
        for attr, key in _CONFIG_KEYS.items():
            value = data.get(key)
            if value is not None:
                kwargs[attr] = bool(value) if attr == "show_charges" else str(value)
        return cls(**kwargs)

    @classmethod
    def field_names(cls) -> list[str]:
        return [f.name for f in fields(cls)]

