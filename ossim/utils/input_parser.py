"""
Configuration and meta-data file parsers
"""

import os
import re
from typing import Dict, Iterable, List, Optional, Tuple

from pydantic import ValidationError

from ossim.core.config import Configuration, LogTarget
from ossim.core.errors import ConfigFormatError, MetaDataFormatError
from ossim.core.operation import (ALLOWED_LABELS, META_DATA_END, META_DATA_START, Operation,
                                 OperationKind)

CONFIG_START = "Start Simulator Configuration File"
CONFIG_END = "End Simulator Configuration File"

# config key -> Configuration field for integer values
INT_KEYS = {
    "Monitor display time {msec}": "monitor",
    "Monitor cycle time {msec}": "monitor",
    "Processor cycle time {msec}": "processor",
    "Scanner cycle time {msec}": "scanner",
    "Hard drive cycle time {msec}": "hard_drive",
    "Keyboard cycle time {msec}": "keyboard",
    "Memory cycle time {msec}": "memory",
    "Projector cycle time {msec}": "projector",
    "Projector quantity": "projector_quantity",
    "Hard drive quantity": "hdd_quantity",
    "Processor Quantum Number": "quantum",
}

SIZE_KEY = re.compile(r"^(System memory|Memory block size) \{(kbytes|Mbytes|Gbytes)\}$")
SIZE_FIELDS = {"System memory": "system_memory", "Memory block size": "memory_block_size"}
SIZE_UNITS = {"kbytes": 1, "Mbytes": 1024, "Gbytes": 1024 * 1024}

REQUIRED_FIELDS = {
    "meta_data_path": "file path",
    "monitor": "monitor time",
    "processor": "processor time",
    "scanner": "scanner time",
    "hard_drive": "hard drive time",
    "keyboard": "keyboard time",
    "memory": "memory time",
    "projector": "projector time",
    "log_target": "log level",
    "log_path": "log file path",
    "system_memory": "system memory",
    "memory_block_size": "memory block size",
    "projector_quantity": "projector quantity",
    "hdd_quantity": "hard drive quantity",
    "quantum": "processor quantum number",
    "scheduling_code": "scheduling algorithm",
}

CODES = {kind.value: kind for kind in OperationKind}
TOKEN = re.compile(r"^(.)\{([^{}]*)\}(.*)$")


class InputParser:
    """Loader for .conf configuration files and .mdf meta-data files"""

    @staticmethod
    def _parse_int(key: str, value: str, line_no: int) -> int:
        try:
            return int(value)
        except ValueError:
            raise ConfigFormatError(f"'{key}' expects an integer, got '{value}'", line_no) from None

    @staticmethod
    def parse_config_lines(lines: Iterable[str]) -> Configuration:
        """
        Parse configuration text

        Args:
            lines: configuration file lines, header included

        Returns:
            validated Configuration

        Raises:
            ConfigFormatError: malformed or incomplete configuration
            UnknownPolicyError: unsupported CPU scheduling code
            DeviceCountZeroError: zero hard drives or projectors
        """
        fields: Dict[str, object] = {}
        header_seen = False

        for line_no, raw in enumerate(lines, start=1):
            line = raw.strip()
            if not line:
                continue
            if not header_seen:
                if line != CONFIG_START:
                    raise ConfigFormatError("bad start of config file", line_no)
                header_seen = True
                continue
            if line == CONFIG_END:
                break
            if ":" not in line:
                raise ConfigFormatError("no colon found", line_no)

            key, value = (part.strip() for part in line.split(":", 1))
            size_match = SIZE_KEY.match(key)

            if key in INT_KEYS:
                fields[INT_KEYS[key]] = InputParser._parse_int(key, value, line_no)
            elif size_match:
                name, unit = size_match.groups()
                amount = InputParser._parse_int(key, value, line_no)
                fields[SIZE_FIELDS[name]] = amount * SIZE_UNITS[unit]
            elif key == "Version/Phase":
                try:
                    fields["version"] = float(value)
                except ValueError:
                    raise ConfigFormatError(f"bad version '{value}'", line_no) from None
            elif key == "File Path":
                fields["meta_data_path"] = value
            elif key == "Log File Path":
                fields["log_path"] = value
            elif key == "Log":
                try:
                    fields["log_target"] = LogTarget(value)
                except ValueError:
                    raise ConfigFormatError(f"unknown log option '{value}'", line_no) from None
            elif key == "CPU Scheduling Code":
                fields["scheduling_code"] = value
            else:
                raise ConfigFormatError(f"incorrect input '{key}'", line_no)

        if not header_seen:
            raise ConfigFormatError("empty config file")

        missing = [label for name, label in REQUIRED_FIELDS.items() if name not in fields]
        if missing:
            raise ConfigFormatError(f"not specified: {', '.join(missing)}")

        try:
            return Configuration(**fields)
        except ValidationError as e:
            problems = "; ".join(f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}"
                                 for err in e.errors())
            raise ConfigFormatError(f"invalid configuration: {problems}") from e

    @staticmethod
    def parse_config_file(filename: str) -> Configuration:
        """Read and validate a .conf file"""
        if not filename.endswith(".conf"):
            raise ConfigFormatError("config file should have .conf extension")
        try:
            with open(filename, 'r', encoding='utf-8') as f:
                return InputParser.parse_config_lines(f)
        except FileNotFoundError:
            raise ConfigFormatError(f"config file '{filename}' not found") from None

    @staticmethod
    def _parse_token(token: str, line_no: Optional[int]) -> Operation:
        kind = CODES.get(token[0])
        if kind is None:
            raise MetaDataFormatError("code", token, line_no)

        match = TOKEN.match(token)
        if not match:
            raise MetaDataFormatError("description", token, line_no)
        _, label, cycles = match.groups()

        # whitespace is stripped before tokenising
        if label == "harddrive":
            label = "hard drive"
        if label not in ALLOWED_LABELS[kind]:
            raise MetaDataFormatError("description", token, line_no)

        if not (cycles.isascii() and cycles.isdigit()):
            raise MetaDataFormatError("cycle", token, line_no)

        return Operation(kind=kind, label=label, cycles=int(cycles))

    @staticmethod
    def parse_meta_line(line: str, line_no: Optional[int] = None) -> List[Operation]:
        """
        Parse one meta-data line into operations

        Tokens look like `P{run}11` and are separated by `;`; the last one
        in a file ends with `.`.
        """
        compact = re.sub(r"\s+", "", line)
        return [InputParser._parse_token(token, line_no)
                for token in re.split(r"[;.]", compact) if token]

    @staticmethod
    def parse_meta_data_lines(lines: Iterable[str]) -> List[Operation]:
        operations: List[Operation] = []
        header_seen = False

        for line_no, raw in enumerate(lines, start=1):
            line = raw.strip()
            if not line:
                continue
            if not header_seen:
                if line != META_DATA_START:
                    raise MetaDataFormatError("header", line, line_no)
                header_seen = True
                continue
            if line == META_DATA_END:
                break
            operations.extend(InputParser.parse_meta_line(line, line_no))

        if not header_seen:
            raise MetaDataFormatError("header", "", None)
        return operations

    @staticmethod
    def parse_meta_data_file(filename: str) -> List[Operation]:
        """Read a .mdf file into a list of operations in arrival order"""
        if not filename.endswith(".mdf"):
            raise ConfigFormatError("meta data file should have .mdf extension")
        try:
            with open(filename, 'r', encoding='utf-8') as f:
                return InputParser.parse_meta_data_lines(f)
        except FileNotFoundError:
            raise ConfigFormatError(f"meta data file '{filename}' not found") from None

    @staticmethod
    def _relative_to_config(path: str, config_path: str) -> str:
        if os.path.isabs(path):
            return path
        return os.path.join(os.path.dirname(os.path.abspath(config_path)), path)

    @staticmethod
    def resolve_meta_data_path(config: Configuration, config_path: str) -> str:
        """Meta-data path from the config, relative paths taken from the config's directory"""
        return InputParser._relative_to_config(config.meta_data_path, config_path)

    @staticmethod
    def resolve_log_path(config: Configuration, config_path: str) -> str:
        """Log file path from the config, resolved like the meta-data path"""
        return InputParser._relative_to_config(config.log_path, config_path)

    @staticmethod
    def load(config_path: str) -> Tuple[Configuration, List[Operation]]:
        """Load a configuration and the meta-data file it points at"""
        config = InputParser.parse_config_file(config_path)
        operations = InputParser.parse_meta_data_file(
            InputParser.resolve_meta_data_path(config, config_path))
        return config, operations
