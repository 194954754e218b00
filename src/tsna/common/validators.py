"""
Input validation helpers.

Validation happens at the API boundary: spell tables are checked before a
network is built from them, and mode/method/statistic parameters are turned
into their enum members before any computation starts.
"""

import numbers
from enum import Enum
from typing import Optional, Type, TypeVar, Union

import polars as pl

from .exceptions import ValidationError, DataFormatError, validate_parameter

E = TypeVar("E", bound=Enum)


def coerce_choice(
    value: Union[str, E],
    choices: Type[E],
    parameter_name: str,
    function_name: Optional[str] = None
) -> E:
    """
    Turn an enum member or its string value into the enum member.

    Parameters
    ----------
    value : Union[str, Enum]
        Enum member, or the string value of one (case-insensitive)
    choices : Type[Enum]
        The enum class of valid options
    parameter_name : str
        Name of the parameter, for the error message
    function_name : str, optional
        Name of the calling function, for the error message

    Returns
    -------
    Enum
        The matching member of ``choices``

    Raises
    ------
    ConfigurationError
        If ``value`` names no member of ``choices``

    Examples
    --------
    >>> coerce_choice("median", DurationAggregate, "aggregate")
    <DurationAggregate.MEDIAN: 'median'>
    """
    if isinstance(value, choices):
        return value

    valid_options = [member.value for member in choices]
    normalized = value.lower() if isinstance(value, str) else value
    validate_parameter(normalized, valid_options, parameter_name, function_name)
    return choices(normalized)


def validate_spell_dataframe(
    df: pl.DataFrame,
    source_col: str = "source",
    target_col: str = "target",
    onset_col: str = "onset",
    terminus_col: str = "terminus"
) -> None:
    """
    Validate an edge spell table.

    Each row is one activation spell of the edge ``(source, target)``.

    Parameters
    ----------
    df : pl.DataFrame
        Spell table
    source_col, target_col : str
        Columns holding integer vertex ids
    onset_col, terminus_col : str
        Columns holding numeric spell bounds

    Raises
    ------
    ValidationError
        If columns are missing, contain nulls, or a spell ends before it starts
    DataFormatError
        If the vertex columns are not integers or the time columns not numeric

    Examples
    --------
    >>> df = pl.DataFrame({
    ...     "source": [1, 2], "target": [2, 3],
    ...     "onset": [0, 10], "terminus": [20, 40]
    ... })
    >>> validate_spell_dataframe(df)
    """
    required_cols = [source_col, target_col, onset_col, terminus_col]
    missing_cols = [col for col in required_cols if col not in df.columns]
    if missing_cols:
        raise ValidationError(
            f"Missing required columns: {missing_cols}",
            field="columns",
            details={"available_columns": df.columns, "missing": missing_cols}
        )

    for col in required_cols:
        null_count = df[col].null_count()
        if null_count > 0:
            raise ValidationError(
                f"Column contains {null_count} null values",
                field=col,
                details={"null_count": null_count, "total_rows": len(df)}
            )

    for col in (source_col, target_col):
        if not df[col].dtype.is_integer():
            raise DataFormatError(
                f"Vertex column must hold integer ids, got {df[col].dtype}",
                format_type="integer",
                column=col,
                dtype=str(df[col].dtype)
            )

    for col in (onset_col, terminus_col):
        if not df[col].dtype.is_numeric():
            raise DataFormatError(
                f"Time column must be numeric, got {df[col].dtype}",
                format_type="numeric",
                column=col,
                dtype=str(df[col].dtype)
            )

    inverted = df.filter(pl.col(onset_col) > pl.col(terminus_col))
    if len(inverted) > 0:
        raise ValidationError(
            f"{len(inverted)} spells have onset after terminus",
            field=onset_col,
            details={"first_rows": inverted.head(3).rows()}
        )


def validate_vertex_id(vertex: int, n_vertices: int, field: str = "vertex") -> None:
    """
    Check that ``vertex`` is an integer id in ``[1..n_vertices]``.

    Any integral type is accepted, including numpy integers read from
    arrays or polars columns. Booleans are rejected.

    Raises
    ------
    ValidationError
        If the id is not an integer or out of range
    """
    if isinstance(vertex, bool) or not isinstance(vertex, numbers.Integral):
        raise ValidationError(
            "Vertex id must be an integer",
            field=field,
            value=vertex,
            expected=f"integer in [1..{n_vertices}]"
        )
    if not 1 <= vertex <= n_vertices:
        raise ValidationError(
            "Vertex id out of range",
            field=field,
            value=vertex,
            expected=f"integer in [1..{n_vertices}]"
        )
