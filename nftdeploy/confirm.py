from collections import OrderedDict

from ape.utils import ZERO_ADDRESS

# longer values (SVG markup) are cut down when shown to the user
MAX_DISPLAY_LENGTH = 64


def _ask(question: str) -> None:
    if input(f"{question} Y/N? ").strip().lower() == "n":
        print("Aborting deployment!")
        exit(-1)


def _display(value) -> str:
    text = str(value)
    if len(text) <= MAX_DISPLAY_LENGTH:
        return text
    return f"{text[:MAX_DISPLAY_LENGTH - 3]}... ({len(text)} chars)"


def confirm_start() -> None:
    _ask("Continue")


def confirm_constructor_args(contract_name: str, args: OrderedDict) -> None:
    """Shows the resolved constructor arguments and asks before deploying."""
    if args:
        print(f"\nConstructor parameters for {contract_name}")
        for name, value in args.items():
            print(f"\t{name}={_display(value)}")
    else:
        print(f"\n(i) No constructor parameters for {contract_name}")

    _ask(f"Deploy {contract_name}")
    if ZERO_ADDRESS in args.values():
        _ask("Zero address detected in constructor parameters; continue")
