from .executor import CommandExecutor, ExecutionResult
from .prompt import TerminalPrompt

__all__ = ["CommandExecutor", "ExecutionResult", "TerminalPrompt"]
