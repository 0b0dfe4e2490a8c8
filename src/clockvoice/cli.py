"""ClockVoice command line

Interprets timeclock sentences given as arguments or read line by line from
stdin, printing the parsed fields and either the CRUD request body or the
reason the sentence was rejected.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from .core.config_manager import ConfigManager
from .core.error_handler import ClockVoiceError, ErrorHandler
from .core.logging_manager import LoggingManager
from .intelligence.taggers import SpacyTagger
from .processors.core.temporal_extractor import PatternDateResolver
from .timeclock.command_interpreter import CommandInterpreter, InterpretationResult
from .timeclock.models import InterpreterConfig
from .timeclock.request_builder import build_crud_request


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="clockvoice",
        description="Interpret spoken or typed timeclock edits"
    )
    parser.add_argument("text", nargs="*", help="Sentences to interpret; stdin lines when omitted")
    parser.add_argument("--employee", action="append", default=None,
                        help="Known employee name (repeatable); replaces the configured roster")
    parser.add_argument("--verbs", help="Comma-separated allowed verbs, e.g. add,change")
    parser.add_argument("--config", help="Configuration directory")
    parser.add_argument("--spacy-model", help="spaCy model to use as part-of-speech tagger")
    parser.add_argument("--json", action="store_true", help="Print results as JSON")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log to the console")
    return parser


def _interpreter_config(base: InterpreterConfig, args: argparse.Namespace) -> InterpreterConfig:
    allowed_verbs = base.allowed_verbs
    if args.verbs:
        allowed_verbs = tuple(verb.strip().lower() for verb in args.verbs.split(',') if verb.strip())
    
    employees = tuple(args.employee) if args.employee else base.available_employees
    return InterpreterConfig(allowed_verbs=allowed_verbs, available_employees=employees)


def _format_result(result: InterpretationResult) -> str:
    command = result.command
    date_time = command.date_time
    
    lines = [
        f"Input:    {command.raw_text}",
        f"Verb:     {command.verb or '-'}",
        f"Employee: {command.employee_name or '-'}",
        f"Row:      {command.row_number if command.row_number is not None else '-'}",
        f"Date:     {f'{date_time.month:02d}/{date_time.day:02d} {date_time.time_string()}' if date_time else '-'}",
        f"Status:   {command.status or '-'}",
    ]
    
    if result.valid:
        request = build_crud_request(command, result.validation)
        lines.append(f"Request:  {json.dumps(request)}")
    else:
        lines.append(f"Rejected: {result.validation.error}")
    
    return "\n".join(lines)


def _to_json(result: InterpretationResult) -> str:
    payload = result.to_dict()
    if result.valid:
        payload["request"] = build_crud_request(result.command, result.validation)
    return json.dumps(payload)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the clockvoice command."""
    args = build_parser().parse_args(argv)
    error_handler = ErrorHandler()
    
    try:
        config_manager = ConfigManager(config_path=Path(args.config) if args.config else None)
        app_config = config_manager.load_config()
        
        LoggingManager().configure(
            level="DEBUG" if args.verbose else app_config.logging.level,
            log_dir=Path(app_config.logging.log_dir),
            log_to_console=args.verbose,
            log_to_file=app_config.logging.log_to_file
        )
        
        settings = app_config.interpreter
        tagger = SpacyTagger(args.spacy_model) if args.spacy_model else None
        interpreter = CommandInterpreter(
            resolver=PatternDateResolver(timezone=settings.reference_timezone),
            tagger=tagger,
            name_window=settings.name_window
        )
        interpreter_config = _interpreter_config(config_manager.to_interpreter_config(), args)
        
    except ClockVoiceError as e:
        error_handler.handle_error(e, "Startup failed")
        print(f"Error: {e.message}", file=sys.stderr)
        return 2
    
    sentences = args.text or [line.strip() for line in sys.stdin if line.strip()]
    
    all_valid = True
    for sentence in sentences:
        result = interpreter.interpret(sentence, interpreter_config)
        all_valid = all_valid and result.valid
        print(_to_json(result) if args.json else _format_result(result))
        if not args.json:
            print()
    
    return 0 if all_valid else 1


if __name__ == "__main__":
    sys.exit(main())
