# src/claude_mode/commands/completion.py
"""Shell completion scripts for bash, zsh and fish."""

from __future__ import annotations

from enum import Enum

from claude_mode.commands.launch import MODE_ALIASES
from claude_mode.config.defaults import APP_NAME
from claude_mode.providers.builtin import OPENROUTER_MODELS, PROVIDER_ALIASES
from claude_mode.providers.models import Provider

SUBCOMMANDS = ["list", "health", "config", "completion", "setup"]
OPTIONS = [
    "--list",
    "-l",
    "--prompt",
    "-p",
    "--dangerously-skip-permissions",
    "-d",
    "--help",
]


class Shell(str, Enum):
    BASH = "bash"
    ZSH = "zsh"
    FISH = "fish"


def _modes(headless: bool) -> list[str]:
    return [mode for mode, is_headless in MODE_ALIASES.items() if is_headless is headless]


def _alias_label(target: str, providers: dict[str, Provider]) -> str:
    provider = providers.get(target)
    return f"{provider.name if provider else target} (alias)"


def bash_completion(providers: dict[str, Provider]) -> str:
    words = " ".join([*providers, *PROVIDER_ALIASES, *SUBCOMMANDS, *OPTIONS])
    shortcuts = " ".join(m.shortcut for m in OPENROUTER_MODELS)
    modes = " ".join(MODE_ALIASES)
    func = f"_{APP_NAME.replace('-', '_')}_completions"
    return f"""# {APP_NAME} bash completion
# Add to ~/.bashrc or ~/.bash_profile:
#   eval "$({APP_NAME} completion bash)"

{func}() {{
    local cur
    COMPREPLY=()
    cur="${{COMP_WORDS[COMP_CWORD]}}"

    if [[ ${{COMP_CWORD}} -eq 1 ]]; then
        COMPREPLY=( $(compgen -W "{words}" -- "${{cur}}") )
        return 0
    fi

    if [[ ${{COMP_CWORD}} -eq 2 ]]; then
        COMPREPLY=( $(compgen -W "{shortcuts}" -- "${{cur}}") )
        return 0
    fi

    if [[ ${{COMP_CWORD}} -eq 3 ]]; then
        COMPREPLY=( $(compgen -W "{modes}" -- "${{cur}}") )
        return 0
    fi
}}

complete -F {func} {APP_NAME}
"""


def zsh_completion(providers: dict[str, Provider]) -> str:
    provider_lines = [f"        '{key}:{p.name}'" for key, p in providers.items()]
    provider_lines += [
        f"        '{alias}:{_alias_label(target, providers)}'"
        for alias, target in PROVIDER_ALIASES.items()
    ]
    provider_lines += [f"        '{cmd}:{cmd} command'" for cmd in SUBCOMMANDS]
    mode_lines = [
        f"        '{mode}:{'Single prompt execution' if headless else 'Interactive terminal mode'}'"
        for mode, headless in MODE_ALIASES.items()
    ]
    func = f"_{APP_NAME.replace('-', '_')}"
    providers_block = "\n".join(provider_lines)
    modes_block = "\n".join(mode_lines)
    return f"""#compdef {APP_NAME}
# {APP_NAME} zsh completion
# Add to ~/.zshrc:
#   eval "$({APP_NAME} completion zsh)"

{func}() {{
    local -a providers modes

    providers=(
{providers_block}
    )

    modes=(
{modes_block}
    )

    case $CURRENT in
        2)
            _describe 'provider' providers
            _arguments '--list[List all models]' '--help[Show help]' \\
                '--prompt[Headless mode with prompt]' '-l[List all models]' \\
                '-p[Headless mode with prompt]'
            ;;
        3)
            _message 'model shortcut or ID'
            ;;
        4)
            _describe 'mode' modes
            ;;
        5)
            _message 'prompt (for headless mode)'
            ;;
    esac
}}

{func} "$@"
"""


def fish_completion(providers: dict[str, Provider]) -> str:
    lines = [
        f"# {APP_NAME} fish completion",
        f"# Add to ~/.config/fish/completions/{APP_NAME}.fish",
        "",
        "# Providers",
    ]
    for key, provider in providers.items():
        lines.append(
            f'complete -c {APP_NAME} -n "__fish_is_first_arg" -a "{key}" -d "{provider.name}"'
        )
    for alias, target in PROVIDER_ALIASES.items():
        lines.append(
            f'complete -c {APP_NAME} -n "__fish_is_first_arg" -a "{alias}" '
            f'-d "{_alias_label(target, providers)}"'
        )
    lines += [
        "",
        "# Subcommands",
        f'complete -c {APP_NAME} -n "__fish_is_first_arg" -a "{" ".join(SUBCOMMANDS)}"',
        "",
        "# Options",
        f'complete -c {APP_NAME} -s l -l list -d "List all models"',
        f'complete -c {APP_NAME} -s p -l prompt -d "Headless mode with prompt"',
        f'complete -c {APP_NAME} -s d -l dangerously-skip-permissions -d "Skip permission prompts"',
        "",
        "# Modes (third argument)",
        f'complete -c {APP_NAME} -n "__fish_seen_argument" -a "{" ".join(_modes(False))}" -d "Interactive mode"',
        f'complete -c {APP_NAME} -n "__fish_seen_argument" -a "{" ".join(_modes(True))}" -d "Headless mode"',
        "",
    ]
    return "\n".join(lines)


_GENERATORS = {
    Shell.BASH: bash_completion,
    Shell.ZSH: zsh_completion,
    Shell.FISH: fish_completion,
}


def generate_completion(shell: Shell, providers: dict[str, Provider]) -> str:
    return _GENERATORS[shell](providers)
