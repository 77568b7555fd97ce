"""
Shell completion scripts.

Scripts are rendered from the argparse parser definition, so new options are
picked up without touching this module.
"""

import argparse
import re
from typing import List

SHELLS = ("bash", "zsh", "fish")

# Options whose value is a filesystem path use this metavar.
PATH_METAVAR = "PATH"


def _options(parser: argparse.ArgumentParser) -> List[argparse.Action]:
    return [
        action
        for action in parser._actions  # pylint: disable=protected-access
        if action.option_strings and action.help != argparse.SUPPRESS
    ]


def _takes_value(action: argparse.Action) -> bool:
    return action.nargs != 0


def _help(action: argparse.Action) -> str:
    return (action.help or "").split(".")[0].strip()


def _function_name(prog: str) -> str:
    return "_" + re.sub(r"\W", "_", prog) + "_completion"


def generate_bash(parser: argparse.ArgumentParser, prog: str) -> str:
    """Render a bash completion script."""
    actions = _options(parser)
    all_options = " ".join(opt for action in actions for opt in action.option_strings)
    function_name = _function_name(prog)

    cases = []
    for action in actions:
        if not _takes_value(action):
            continue
        pattern = "|".join(action.option_strings)
        if action.choices:
            words = " ".join(str(choice) for choice in action.choices)
            reply = f'COMPREPLY=( $(compgen -W "{words}" -- "${{cur}}") )'
        elif action.metavar == PATH_METAVAR:
            reply = 'COMPREPLY=( $(compgen -f -- "${cur}") )'
        else:
            reply = "COMPREPLY=()"
        cases.append(f"        {pattern})\n            {reply}\n            return 0\n            ;;")

    lines = [
        f"{function_name}() {{",
        "    local cur prev",
        '    cur="${COMP_WORDS[COMP_CWORD]}"',
        '    prev="${COMP_WORDS[COMP_CWORD-1]}"',
        '    case "${prev}" in',
        *cases,
        "    esac",
        f'    COMPREPLY=( $(compgen -W "{all_options}" -- "${{cur}}") )',
        "}",
        f"complete -F {function_name} {prog}",
    ]
    return "\n".join(lines) + "\n"


def _zsh_escape(text: str) -> str:
    return text.replace("'", "'\\''").replace("[", "\\[").replace("]", "\\]").replace(":", "\\:")


def generate_zsh(parser: argparse.ArgumentParser, prog: str) -> str:
    """Render a zsh completion script."""
    specs = []
    for action in _options(parser):
        description = _zsh_escape(_help(action))
        if not _takes_value(action):
            value = ""
        elif action.choices:
            value = f":{action.dest}:({' '.join(str(choice) for choice in action.choices)})"
        elif action.metavar == PATH_METAVAR:
            value = f":{action.dest}:_files"
        else:
            value = f":{action.dest}:"
        for option in action.option_strings:
            specs.append(f"    '{option}[{description}]{value}'")

    lines = [f"#compdef {prog}", "", "_arguments \\"]
    lines.append(" \\\n".join(specs))
    return "\n".join(lines) + "\n"


def generate_fish(parser: argparse.ArgumentParser, prog: str) -> str:
    """Render a fish completion script."""
    lines = []
    for action in _options(parser):
        parts = [f"complete -c {prog}"]
        for option in action.option_strings:
            if option.startswith("--"):
                parts.append(f"-l {option[2:]}")
            else:
                parts.append(f"-s {option[1:]}")
        description = _help(action).replace("'", "\\'")
        if description:
            parts.append(f"-d '{description}'")
        if _takes_value(action):
            if action.choices:
                parts.append(f"-x -a '{' '.join(str(choice) for choice in action.choices)}'")
            elif action.metavar == PATH_METAVAR:
                parts.append("-r -F")
            else:
                parts.append("-x")
        lines.append(" ".join(parts))
    return "\n".join(lines) + "\n"


def generate_completion(parser: argparse.ArgumentParser, shell: str, prog: str) -> str:
    """
    Generate a shell completion script for the given parser.

    Args:
        parser: Parser describing the command line
        shell: One of 'bash', 'zsh' or 'fish'
        prog: Command name the script completes

    Returns:
        Completion script text

    Raises:
        ValueError: If the shell is not supported
    """
    generators = {
        "bash": generate_bash,
        "zsh": generate_zsh,
        "fish": generate_fish,
    }
    if shell not in generators:
        raise ValueError(f"Unsupported shell: {shell}. Supported shells: {', '.join(SHELLS)}")
    return generators[shell](parser, prog)
