import json
from typing import Any

from fastmcp.utilities.logging import get_logger
from pydantic import BaseModel, TypeAdapter, ValidationError

logger = get_logger(__name__)


def extract_object(text: str) -> Any | None:  # pyright: ignore[reportAny]
    """Extract the outermost JSON object from a text string, tolerating surrounding prose.

    Models often wrap their answer in prose or a Markdown code fence, for example:
    Here is your answer:
    ```json
    {"name": "John", "age": 30}
    ```

    The object is taken from the first `{` through the last `}`. Text holding more than one
    object therefore spans all of them and fails to parse. Returns None when nothing parses."""

    json_start: int = text.find("{")
    json_end: int = text.rfind("}")

    if json_start == -1 or json_end == -1:
        try:
            return json.loads(text)  # pyright: ignore[reportAny]
        except (ValueError, RecursionError):
            logger.warning("No JSON object found in the text and parsing it directly failed.")
            return None

    json_text: str = text[json_start : json_end + 1]

    try:
        return json.loads(json_text)  # pyright: ignore[reportAny]
    except (ValueError, RecursionError) as e:
        logger.warning(f"Failed to parse extracted JSON: {e}. Original text: {text}")
        return None


def extract_model[T: BaseModel](text: str, model_type: type[T]) -> T | None:
    """Extract an object from a text string and validate it as `model_type`.

    Returns None if no object is found or it does not match the model, leaving the caller to
    treat the result as incomplete."""

    if (extracted := extract_object(text)) is None:
        return None

    try:
        return TypeAdapter[T](model_type).validate_python(extracted)
    except ValidationError as e:
        logger.warning(f"Extracted JSON is not a valid {model_type.__name__}: {e}")
        return None


def extract_items[T: BaseModel](text: str, key: str, item_type: type[T]) -> list[T] | None:
    """Extract the list held under `key` of an object, keeping only the items that validate as `item_type`.

    Returns None if no object with such a list is found."""

    extracted = extract_object(text)  # pyright: ignore[reportAny]

    if not isinstance(extracted, dict) or not isinstance(items := extracted.get(key), list):  # pyright: ignore[reportUnknownMemberType]
        logger.warning(f"Extracted JSON has no {key!r} list.")
        return None

    valid_items: list[T] = []

    for item in items:  # pyright: ignore[reportUnknownVariableType]
        try:
            valid_items.append(item_type.model_validate(item))
        except ValidationError as e:
            logger.warning(f"Skipping an item that is not a valid {item_type.__name__}: {e}")

    return valid_items
