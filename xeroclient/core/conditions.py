"""Query helpers for the Xero API filter (``where``) and ``order`` parameters."""
from __future__ import annotations
import logging
from typing import Any, Dict, List
from urllib.parse import unquote_plus

from .exceptions import InvalidArgumentError

logger = logging.getLogger(__name__)

CONDITION_OPERATORS = ("==", "!=", "StartsWith", "EndsWith", "Contains", "guid")
LOGICAL_OPERATORS = ("AND", "OR")


def parse_parameters(query: str) -> Dict[str, str]:
    """Parse an ``a=b&c=d`` string into a dict of percent-decoded values.
    
    Each pair is split on the first ``=`` only, so values may contain ``=``.
    A pair without ``=`` maps to an empty string.
    """
    params: Dict[str, str] = {}
    for pair in query.split("&"):
        if not pair:
            continue
        key, _, value = pair.partition("=")
        params[unquote_plus(key)] = unquote_plus(value)
    return params


class QueryHelper:
    """Accumulates filter conditions for GET requests.
    
    Conditions and logical operators are kept in the order they are added
    and compiled into a single ``where`` expression:
    
        builder.add_condition("Name", "Test").add_operator("OR").add_condition("Code", "2", "StartsWith")
        params = builder.compile_conditions()
    
    The accumulated conditions are only reset by ``clear_conditions``.
    """

    def __init__(self):
        self._conditions: List[str] = []

    def get_conditions(self) -> List[str]:
        """Get a copy of the accumulated conditions."""
        return list(self._conditions)

    def clear_conditions(self) -> None:
        self._conditions.clear()

    def add_condition(self, field: str, value: Any = "", operator: str = "=="):
        """Add a condition to the request.
        
        Args:
            field: Field to filter on
            value: Value to compare against; booleans become true/false
            operator: One of:
                - ==: Equal to the value
                - !=: Not equal to the value
                - StartsWith, EndsWith, Contains: String matching
                - guid: Equality for guid values
                
        Returns:
            self, for chaining
            
        Raises:
            InvalidArgumentError: If the operator is not supported
        """
        if operator not in CONDITION_OPERATORS:
            raise InvalidArgumentError("Invalid operator")

        if isinstance(value, bool):
            value = "true" if value else "false"

        if operator in ("==", "!="):
            condition = f'{field}{operator}"{value}"'
        elif operator == "guid":
            # The filter grammar expects the space after "=".
            condition = f'{field}= Guid("{value}")'
        else:
            condition = f'{field}.{operator}("{value}")'

        self._conditions.append(condition)
        return self

    def add_operator(self, operator: str = "AND"):
        """Add a logical AND or OR between conditions.
        
        Raises:
            InvalidArgumentError: If the operator is not AND or OR
        """
        if operator not in LOGICAL_OPERATORS:
            raise InvalidArgumentError("Invalid logical operator")

        self._conditions.append(operator)
        return self

    def compile_conditions(self) -> Dict[str, str]:
        """Compile the conditions into query parameters.
        
        Returns:
            {"where": "..."} or an empty dict when there are no conditions
        """
        conditions = self._conditions
        if not conditions:
            return {}
        where = " ".join(conditions)
        logger.debug("Compiled where clause: %s", where)
        return {"where": where}

    @staticmethod
    def order_by(field: str, direction: str = "ASC") -> Dict[str, str]:
        """Get the order query parameter. Only "DESC" sorts descending."""
        if direction == "DESC":
            return {"order": f"{field} DESC"}
        return {"order": field}

    @staticmethod
    def get_request_parameters(request_parameters: str) -> Dict[str, str]:
        """Parse the parameters Xero sends back to the callback URL."""
        return parse_parameters(request_parameters)


class QueryBuilder(QueryHelper):
    """Standalone condition builder, one per logical request."""
