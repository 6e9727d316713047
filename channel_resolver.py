"""Resolve typed channel and sampling settings from a loaded INI mapping.

Channel sections are those whose name contains a keyword (``DAQmxChannel`` by
default). Each one yields at most one ChannelSpec; sections with a channel or
measurement type we do not know are skipped without error so that a file can
carry entries for hardware this program does not drive yet. The first section
containing the task keyword (``DAQmxTask``) supplies the sample clock.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

from config import CHANNEL_SECTION_KEYWORD, TASK_SECTION_KEYWORD
from config_store import ConfigError, ConfigMapping

logger = logging.getLogger(__name__)

DEFAULT_SHUNT_RESISTANCE = 249.0  # ohms
DEFAULT_SHUNT_LOCATION = "Internal"

SHUNT_LOCATIONS = ("Internal", "External", "Let Driver Choose")
TERMINAL_CONFIGS = ("Default", "RSE", "NRSE", "Differential", "Pseudodifferential")


class MissingField(ConfigError):
    def __init__(self, section: str, key: str):
        self.section = section
        self.key = key
        super().__init__(f"Section [{section}] is missing required key '{key}'")


class InvalidNumericField(ConfigError):
    def __init__(self, section: str, key: str, value: str, reason: str = "not a number"):
        self.section = section
        self.key = key
        self.value = value
        super().__init__(f"Section [{section}] key '{key}' = {value!r}: {reason}")


class InvalidOptionField(ConfigError):
    def __init__(self, section: str, key: str, value: str, choices: Tuple[str, ...]):
        self.section = section
        self.key = key
        self.value = value
        self.choices = choices
        super().__init__(
            f"Section [{section}] key '{key}' = {value!r}: expected one of {', '.join(choices)}"
        )


class ChannelKind(Enum):
    ANALOG_INPUT = "Analog Input"


class MeasurementType(Enum):
    VOLTAGE = "Voltage"
    CURRENT = "Current"
    ACCELEROMETER = "Accelerometer"


@dataclass(frozen=True)
class ChannelSpec:
    physical_channel: str
    kind: ChannelKind
    measurement_type: MeasurementType
    min_val: float
    max_val: float
    auxiliary: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class SamplingSpec:
    rate: float
    samples_per_channel: int


@dataclass(frozen=True)
class AcquisitionPlan:
    channels: Tuple[ChannelSpec, ...]
    sampling: Optional[SamplingSpec] = None


def _require(name: str, section: Mapping[str, str], key: str) -> str:
    try:
        return section[key]
    except KeyError:
        raise MissingField(name, key) from None


def _parse_float(name: str, key: str, value: str) -> float:
    try:
        number = float(value)
    except ValueError:
        raise InvalidNumericField(name, key, value) from None
    if not math.isfinite(number):
        raise InvalidNumericField(name, key, value, "not a finite number")
    return number


def _parse_int(name: str, key: str, value: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise InvalidNumericField(name, key, value, "not an integer") from None


def _parse_option(name: str, key: str, value: str, choices: Tuple[str, ...]) -> str:
    # Option spellings are matched case-insensitively and returned in canonical form
    for choice in choices:
        if value.lower() == choice.lower():
            return choice
    raise InvalidOptionField(name, key, value, choices)


def _lookup_enum(enum_cls, value: str):
    for member in enum_cls:
        if member.value == value:
            return member
    return None


def select_sections(mapping: ConfigMapping, keyword: str) -> List[str]:
    """Return the names of sections containing ``keyword``, sorted by name."""
    return sorted(name for name in mapping if keyword in name)


def _auxiliary_fields(name: str, section: Mapping[str, str], meas_type: MeasurementType) -> Dict[str, Any]:
    aux: Dict[str, Any] = {}

    if "AI.TermCfg" in section:
        aux["terminal_config"] = _parse_option(name, "AI.TermCfg", section["AI.TermCfg"], TERMINAL_CONFIGS)

    if meas_type is MeasurementType.CURRENT:
        resistance = section.get("AI.CurrentShunt.Resistance")
        aux["shunt_resistance"] = (
            _parse_float(name, "AI.CurrentShunt.Resistance", resistance)
            if resistance is not None
            else DEFAULT_SHUNT_RESISTANCE
        )
        location = section.get("AI.CurrentShunt.Loc")
        aux["shunt_location"] = (
            _parse_option(name, "AI.CurrentShunt.Loc", location, SHUNT_LOCATIONS)
            if location is not None
            else DEFAULT_SHUNT_LOCATION
        )
        if aux["shunt_resistance"] <= 0:
            raise InvalidNumericField(name, "AI.CurrentShunt.Resistance", str(resistance), "must be positive")
    elif meas_type is MeasurementType.ACCELEROMETER:
        raw = _require(name, section, "AI.Accel.Sensitivity")
        aux["sensitivity"] = _parse_float(name, "AI.Accel.Sensitivity", raw)

    return aux


def resolve_channel(name: str, section: Mapping[str, str]) -> Optional[ChannelSpec]:
    """Build a ChannelSpec from one channel section.

    Returns None for an unrecognised ``ChanType`` or ``AI.MeasType``. Raises
    MissingField for absent required keys and InvalidNumericField when the
    range limits are not numbers or do not satisfy min < max.
    """
    chan_type = _require(name, section, "ChanType")
    physical_channel = _require(name, section, "PhysicalChanName")
    raw_min = _require(name, section, "AI.Min")
    raw_max = _require(name, section, "AI.Max")
    min_val = _parse_float(name, "AI.Min", raw_min)
    max_val = _parse_float(name, "AI.Max", raw_max)

    kind = _lookup_enum(ChannelKind, chan_type)
    if kind is None:
        logger.debug(f"Skipping [{name}]: unsupported ChanType {chan_type!r}")
        return None

    meas_raw = _require(name, section, "AI.MeasType")
    meas_type = _lookup_enum(MeasurementType, meas_raw)
    if meas_type is None:
        logger.debug(f"Skipping [{name}]: unsupported AI.MeasType {meas_raw!r}")
        return None

    if not min_val < max_val:
        raise InvalidNumericField(name, "AI.Max", raw_max, f"must be greater than AI.Min ({raw_min})")

    return ChannelSpec(
        physical_channel=physical_channel,
        kind=kind,
        measurement_type=meas_type,
        min_val=min_val,
        max_val=max_val,
        auxiliary=MappingProxyType(_auxiliary_fields(name, section, meas_type)),
    )


def resolve_sampling(
    mapping: ConfigMapping,
    default: Optional[SamplingSpec] = None,
    keyword: str = TASK_SECTION_KEYWORD,
) -> Optional[SamplingSpec]:
    """Read the sample clock from the first task section, or return ``default``."""
    task_sections = select_sections(mapping, keyword)
    if not task_sections:
        return default

    # Only the first task section is honoured
    name = task_sections[0]
    if len(task_sections) > 1:
        logger.warning(f"Multiple task sections found; using [{name}], ignoring {task_sections[1:]}")

    section = mapping[name]
    raw_rate = _require(name, section, "SampClk.Rate")
    raw_samples = _require(name, section, "SampQuant.SampPerChan")
    rate = _parse_float(name, "SampClk.Rate", raw_rate)
    samples = _parse_int(name, "SampQuant.SampPerChan", raw_samples)
    if rate <= 0:
        raise InvalidNumericField(name, "SampClk.Rate", raw_rate, "must be positive")
    if samples <= 0:
        raise InvalidNumericField(name, "SampQuant.SampPerChan", raw_samples, "must be positive")
    return SamplingSpec(rate=rate, samples_per_channel=samples)


def resolve_plan(
    mapping: ConfigMapping,
    default_sampling: Optional[SamplingSpec] = None,
    channel_keyword: str = CHANNEL_SECTION_KEYWORD,
    task_keyword: str = TASK_SECTION_KEYWORD,
) -> AcquisitionPlan:
    channels: List[ChannelSpec] = []
    for name in select_sections(mapping, channel_keyword):
        spec = resolve_channel(name, mapping[name])
        if spec is not None:
            channels.append(spec)
    sampling = resolve_sampling(mapping, default_sampling, task_keyword)
    logger.info(f"Resolved {len(channels)} channel(s); sampling: {sampling}")
    return AcquisitionPlan(channels=tuple(channels), sampling=sampling)
