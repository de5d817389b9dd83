from rich.console import Console
from rich.text import Text


class InputOutput:
    """Console reporting for a rehost run.

    Progress goes to stdout, warnings and errors to stderr.
    """

    def __init__(
        self,
        pretty=True,
        output=None,
        error_output=None,
        tool_output_color=None,
        tool_error_color="red",
        tool_warning_color="#FFA500",
    ):
        self.pretty = pretty
        if not pretty:
            tool_output_color = None
            tool_error_color = None
            tool_warning_color = None

        self.tool_output_color = tool_output_color
        self.tool_error_color = tool_error_color
        self.tool_warning_color = tool_warning_color

        console_kwargs = dict(highlight=False, soft_wrap=True)
        if not pretty:
            console_kwargs.update(force_terminal=False, no_color=True)

        self.console = Console(file=output, **console_kwargs)
        if error_output is None:
            self.error_console = Console(stderr=True, **console_kwargs)
        else:
            self.error_console = Console(file=error_output, **console_kwargs)

    def _print(self, console, messages, color):
        style = dict(style=color) if color else dict()
        for message in messages:
            # Text() keeps rich from treating brackets in URLs as markup
            console.print(Text(str(message)), **style)

    def tool_output(self, *messages):
        self._print(self.console, messages, self.tool_output_color)

    def tool_warning(self, *messages):
        self._print(self.error_console, messages, self.tool_warning_color)

    def tool_error(self, *messages):
        self._print(self.error_console, messages, self.tool_error_color)
