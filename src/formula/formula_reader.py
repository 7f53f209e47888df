"""Read formula source text from a binary stream."""

from typing import BinaryIO

from formula.formula_error import FormulaReadError


def read_source(stream: BinaryIO, chunk_size: int = 1000) -> str:
    """
    Read a binary stream to the end and decode it as UTF-8.

    Args:
        stream: Stream to read
        chunk_size: Number of bytes to request per read

    Returns:
        The decoded text

    Raises:
        FormulaReadError: If the bytes are not valid UTF-8
    """
    data = bytearray()
    while True:
        chunk = stream.read(chunk_size)
        if not chunk:
            break

        data.extend(chunk)

    try:
        return data.decode('utf-8')

    except UnicodeDecodeError as e:
        raise FormulaReadError(
            message=f"Input is not valid UTF-8 at byte {e.start}",
            received=f"Bytes: {bytes(data[e.start:e.start + 4])!r}",
            expected="UTF-8 encoded text",
            suggestion="Save the formula as UTF-8"
        ) from e
