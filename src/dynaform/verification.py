"""
Autocompletado a partir del resultado de verificación de identidad.

El resultado del proveedor es opaco para el motor: sólo se consume a través
de map_verification_result() (función pura) y is_verification_result_valid().
Los valores se aplican con el mismo setter que usa la entrada manual.
"""

import logging
import re
from datetime import datetime
from typing import Any, Callable, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)


CITY_ALIASES = {
    "hà nội": "hanoi",
    "ha noi": "hanoi",
    "hanoi": "hanoi",
    "hồ chí minh": "hcm",
    "ho chi minh": "hcm",
    "hcm": "hcm",
    "sài gòn": "hcm",
    "saigon": "hcm",
    "đà nẵng": "danang",
    "da nang": "danang",
    "danang": "danang",
    "hải phòng": "haiphong",
    "hai phong": "haiphong",
    "haiphong": "haiphong",
    "cần thơ": "cantho",
    "can tho": "cantho",
    "cantho": "cantho",
}

MALE_VALUES = {"nam", "male", "m"}
FEMALE_VALUES = {"nữ", "nu", "female", "f"}

MIN_BIRTH_YEAR = 1900


def _section(result: Any, name: str) -> Optional[dict]:
    """Sección del resultado; los datos pueden venir en <name>.object."""
    if not isinstance(result, dict):
        return None
    section = result.get(name)
    if not isinstance(section, dict):
        return None
    inner = section.get("object")
    return inner if isinstance(inner, dict) and inner else section


def to_iso_date(text: str) -> str:
    """DD/MM/YYYY -> YYYY-MM-DD; otro formato se devuelve tal cual."""
    if not text:
        return ""
    parts = text.split("/")
    if len(parts) != 3:
        return text
    day, month, year = parts
    return f"{year}-{month.zfill(2)}-{day.zfill(2)}"


def normalize_gender(value: str) -> str:
    """Género normalizado: male | female | other."""
    normalized = (value or "").strip().lower()
    if normalized in MALE_VALUES:
        return "male"
    if normalized in FEMALE_VALUES:
        return "female"
    return "other"


def clean_address(address: str) -> str:
    """Saltos de línea -> comas, espacios colapsados, comas duplicadas fuera."""
    text = address.strip()
    text = re.sub(r"\n+", ", ", text)
    text = re.sub(r"\s+", " ", text)
    return re.sub(r",\s*,", ",", text)


def extract_city(address: str) -> str:
    """Código de ciudad encontrado en la dirección, o ""."""
    if not address:
        return ""
    lowered = address.lower()
    for alias, city in CITY_ALIASES.items():
        if alias in lowered:
            return city
    return ""


def map_verification_result(result: Any) -> dict:
    """
    Convierte el resultado de verificación en valores del formulario.

    Args:
        result: Resultado del proveedor (dict con sección ocr)

    Returns:
        Valores parciales: fullName, dateOfBirth, gender, address, city
    """
    ocr = _section(result, "ocr")
    if not ocr:
        logger.warning("Resultado de verificación sin datos OCR")
        return {}

    data: dict[str, str] = {}

    name = ocr.get("name")
    if isinstance(name, str) and name.strip():
        data["fullName"] = name.strip()

    birth_day = ocr.get("birth_day")
    if isinstance(birth_day, str) and birth_day:
        iso_date = to_iso_date(birth_day)
        if len(iso_date) == 10:
            try:
                year = int(iso_date[:4])
            except ValueError:
                year = 0
            if MIN_BIRTH_YEAR <= year <= datetime.now().year:
                data["dateOfBirth"] = iso_date
            else:
                logger.warning("Año de nacimiento inválido: %s", iso_date[:4])

    gender = ocr.get("gender") or ocr.get("sex")
    if isinstance(gender, str) and gender:
        data["gender"] = normalize_gender(gender)

    address = ocr.get("recent_location") or ocr.get("address")
    if isinstance(address, str) and address:
        cleaned = clean_address(address)
        if cleaned:
            data["address"] = cleaned
            city = extract_city(cleaned)
            if city:
                data["city"] = city

    logger.debug("Datos de verificación mapeados: %s", sorted(data))
    return data


def is_verification_result_valid(result: Any) -> bool:
    """Un resultado vacío o ausente no es válido."""
    return bool(result)


class VerificationSummary(BaseModel):
    """Resumen del resultado para mostrar y confirmar."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id_number: str = "N/A"
    full_name: str = "N/A"
    date_of_birth: str = "N/A"
    address: str = "N/A"
    verified_at: str = Field(default_factory=lambda: datetime.now().isoformat())
    face_match: bool = False
    match_score: Optional[float] = None
    match_message: Optional[str] = None


def verification_summary(result: Any) -> VerificationSummary:
    ocr = _section(result, "ocr") or {}
    compare = _section(result, "compare") or {}

    raw_address = ocr.get("recent_location") or ocr.get("address")
    address = re.sub(r"\s+", " ", re.sub(r"\n+", ", ", raw_address.strip())) if raw_address else "N/A"

    return VerificationSummary(
        id_number=ocr.get("id") or "N/A",
        full_name=ocr.get("name") or "N/A",
        date_of_birth=ocr.get("birth_day") or "N/A",
        address=address,
        face_match=compare.get("msg") == "MATCH",
        match_score=compare.get("prob"),
        match_message=compare.get("result"),
    )


def apply_autofill(data: dict, set_value: Callable[[str, Any], Any]) -> list[str]:
    """
    Aplica valores mapeados con el setter del formulario.

    Returns:
        Nombres de los campos completados
    """
    applied = []
    for name, value in data.items():
        if value is None or value == "":
            continue
        set_value(name, value)
        applied.append(name)
    return applied
