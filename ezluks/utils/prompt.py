"""
Interactive prompts.

Every prompt reads a single line through an injectable input function so
workflows can be driven by scripted answers.
"""
import logging
from typing import Callable, Optional

from ezluks.core.exceptions import ConfirmationError, EzluksError

logger = logging.getLogger('ezluks')

InputFunc = Callable[[str], str]

CONFIRMATION_TOKEN = "YES"


def ask(message: str, input_func: InputFunc = input) -> str:
    """
    Read one line of input.

    Raises:
        EzluksError: If input is closed before a line is read
    """
    try:
        return input_func(message)
    except EOFError:
        raise EzluksError("No input received, aborting..")


def ask_until_valid(
    message: str,
    validator: Callable[[str], Optional[str]],
    input_func: InputFunc = input,
) -> str:
    """
    Prompt repeatedly until the validator accepts the answer.

    Args:
        message: Prompt text
        validator: Returns the accepted value, or None to reprompt.
            It is expected to report why an answer was rejected.
        input_func: Line reader

    Returns:
        The value returned by the validator
    """
    while True:
        accepted = validator(ask(message, input_func))
        if accepted is not None:
            return accepted


def confirm_destructive(device: str, input_func: InputFunc = input) -> None:
    """
    Ask the user to confirm wiping a device.

    Only the exact token YES is accepted; no case folding and no
    whitespace trimming beyond the line terminator.

    Raises:
        ConfirmationError: If the answer is anything else or input is closed
    """
    print(f"Are you SURE you want to luksFormat {device}? THIS *WILL* WIPE ALL DATA ON IT!")
    try:
        answer = input_func("Enter the string yes in all capitals to continue: ").rstrip("\r\n")
    except EOFError:
        answer = None

    if answer != CONFIRMATION_TOKEN:
        raise ConfirmationError(f"User did not confirm formatting of {device}, aborting..")
    logger.debug(f"Formatting of {device} confirmed")
