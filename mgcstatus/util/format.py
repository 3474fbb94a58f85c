import dataclasses
import json
import typing as t
from copy import deepcopy
from enum import Enum

import yaml


class OutputFormat(str, Enum):
    """Possible supported output formats."""

    TABLE = "table"
    JSON = "json"
    YAML = "yaml"


@dataclasses.dataclass
class FlexibleFormatter:
    thing: t.Any

    def format(self, format_: t.Union[str, OutputFormat]):
        """
        Formats the data to the specified output format.

        If a string is provided for the format, it is converted to a supported
        OutputFormat in a case-insensitive manner. A ValueError is raised if the
        string does not match any supported format, and a NotImplementedError is
        raised if the specified format is not implemented.

        Args:
            format_ (Union[str, OutputFormat]): The desired output format.

        Returns:
            str: The formatted data.

        Raises:
            ValueError: If the provided format string is unrecognized.
            NotImplementedError: If the specified format is unsupported.
        """
        if isinstance(format_, str):
            try:
                format_ = OutputFormat(format_.lower())
            except ValueError as e:
                raise ValueError(
                    f"Unsupported format: {format_}. Choose from: {', '.join(f.value for f in OutputFormat)}"
                ) from e

        if format_ == "json":
            return self.to_json()
        elif format_ == "yaml":
            return self.to_yaml()
        elif format_ == "table":
            return self.to_table()

        raise NotImplementedError(f"Unsupported format: {format_}")

    def to_dict(self) -> t.Any:
        return deepcopy(self.thing)

    def to_json(self) -> str:
        return json.dumps(self.thing, sort_keys=False, indent=2, ensure_ascii=False)

    def to_yaml(self) -> str:
        return yaml.dump(self.thing, sort_keys=False)

    def to_table(self) -> str:
        raise NotImplementedError("Formatting to table needs a domain-specific implementation")
