"""Request Builder for the Timeclock CRUD Relay

Turns a validated command into the JSON body the remote employee CRUD
endpoint expects. Nothing is sent from here.
"""

from typing import Any, Dict

from ..core.error_handler import RequestBuildError
from ..core.logging_manager import LoggingManager
from .models import ParsedCommand
from .validators import ValidationResult


CRUD_ROUTE = "updateEmployee"

logger = LoggingManager.get_logger(__name__)


def build_opts(command: ParsedCommand) -> Dict[str, Any]:
    """Collect the optional fields present on a command."""
    opts: Dict[str, Any] = {}
    
    if command.row_number is not None:
        opts["rowNumber"] = command.row_number
    if command.date_time is not None:
        opts["dateComponents"] = command.date_time.to_dict()
        opts["time"] = command.date_time.time_string()
    if command.status is not None:
        opts["status"] = command.status
        
    return opts


def build_crud_request(command: ParsedCommand, validation: ValidationResult) -> Dict[str, Any]:
    """Build the relay body for a command.
    
    Args:
        command: Parsed command
        validation: Result of validating that command
        
    Returns:
        Body with action, employee, opts and route
        
    Raises:
        RequestBuildError: If the command was rejected or lacks an action
            or employee
    """
    if not validation.valid:
        raise RequestBuildError(f"Cannot build request for rejected command: {validation.error}")
    
    if not command.verb or not command.employee_name:
        raise RequestBuildError("Missing action or employee")
    
    body = {
        "action": command.verb,
        "employee": command.employee_name,
        "opts": build_opts(command),
        "route": CRUD_ROUTE
    }
    
    logger.debug(f"Built {command.verb} request for {command.employee_name}")
    return body
