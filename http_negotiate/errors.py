class MalformedInputError(ValueError):
    """The input does not match the media-type grammar in its entirety."""

    def __init__(self, source: str, rule_name: str):
        super().__init__(f'The input does not constitute a valid "{rule_name}": {source!r}')
        self.source = source
        self.rule_name = rule_name
