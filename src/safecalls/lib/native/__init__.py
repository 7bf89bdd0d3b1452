"""Native runtime: calls that signal failure through a sentinel and the last-error channel."""
