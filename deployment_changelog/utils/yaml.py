"""Contains utility functions for writing YAML output."""

from io import StringIO
from typing import Any

from ruamel.yaml import YAML


def create_yaml_dumper() -> YAML:
    """Creates a properly configured YAML object for dumping with multiline string support."""
    yaml_dumper = YAML()
    yaml_dumper.default_flow_style = False
    yaml_dumper.explicit_start = True
    yaml_dumper.indent(mapping=2, sequence=4, offset=2)  # type: ignore[attr-defined]
    yaml_dumper.width = 4096  # Prevent line wrapping for long lines

    # Commit messages and issue descriptions are usually multiline
    def represent_str(dumper: Any, data: str) -> Any:
        """Custom string representer that uses literal scalar style for multiline strings."""
        if "\n" in data:
            return dumper.represent_scalar("tag:yaml.org,2002:str", data, style="|")
        return dumper.represent_scalar("tag:yaml.org,2002:str", data)

    yaml_dumper.representer.add_representer(str, represent_str)  # type: ignore[attr-defined]

    return yaml_dumper


def dump_yaml_to_string(data: Any) -> str:
    """Dumps data to a YAML string with proper multiline string formatting."""
    stream = StringIO()
    create_yaml_dumper().dump(data, stream)  # type: ignore[misc]
    return stream.getvalue()

