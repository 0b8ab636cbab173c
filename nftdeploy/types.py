import click


class MinInt(click.ParamType):
    """An integer option with a lower bound, e.g. block confirmations."""

    name = "minint"

    def __init__(self, min_value: int):
        self.min_value = min_value

    def convert(self, value, param, ctx):
        try:
            number = int(value)
        except ValueError:
            self.fail(f"{value} is not a valid integer", param, ctx)
        if number < self.min_value:
            self.fail(
                f"{value} is less than the minimum allowed value of {self.min_value}", param, ctx
            )
        return number
