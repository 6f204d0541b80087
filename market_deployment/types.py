import click
from eth_utils import to_checksum_address


class MinInt(click.ParamType):
    name = "minint"

    def __init__(self, min_value):
        self.min_value = min_value

    def convert(self, value, param, ctx):
        try:
            ivalue = int(value)
        except ValueError:
            self.fail(f"{value} is not a valid integer", param, ctx)
        if ivalue < self.min_value:
            self.fail(
                f"{value} is less than the minimum allowed value of {self.min_value}", param, ctx
            )
        return ivalue


class Percentage(MinInt):
    """A whole-number percentage, e.g. '25' for 25%."""

    name = "percentage"

    def __init__(self):
        super().__init__(min_value=0)

    def convert(self, value, param, ctx):
        ivalue = super().convert(value, param, ctx)
        if ivalue > 100:
            self.fail(f"{value} is greater than 100%", param, ctx)
        return ivalue


class ChecksumAddress(click.ParamType):
    name = "checksum_address"

    def convert(self, value, param, ctx):
        try:
            value = to_checksum_address(value=value)
        except ValueError:
            self.fail(f"'{value}' doesn't look like a valid address", param, ctx)
        else:
            return value


class PrefixedString(click.ParamType):
    name = "prefixed_string"

    def __init__(self, prefix: str):
        self.prefix = prefix

    def convert(self, value, param, ctx):
        if not value.startswith(self.prefix):
            self.fail(f'Input "{value}" must start with "{self.prefix}"', param, ctx)
        return value
