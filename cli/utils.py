"""
Shared CLI utilities.
"""
from typing import Optional


def prompt(prompt_text: str) -> str:
    """Prompt user for input with EOF handling."""
    try:
        return input(prompt_text)
    except EOFError:
        return ""


def input_required(prompt_text: str) -> Optional[str]:
    """Prompt for a non-empty value; None when left blank."""
    val = prompt(prompt_text).strip()
    if val == "":
        print("Value is required.")
        return None
    return val


def format_gwei(wei: int) -> str:
    return f"{wei / 10 ** 9:.3f} gwei"
