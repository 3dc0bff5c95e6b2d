from errors import ValidationError


def unquote(value):
    if len(value) >= 2 and value[0] == value[-1] == '"':
        return value[1:-1]
    return value


def parse_fields(pairs):
    """Turn `key=value` arguments into a request body.

    Only the first `=` splits, so values may contain `=` themselves.
    Surrounding double quotes are stripped from the value.
    """
    body = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise ValidationError(
                "Invalid field format.",
                hint=f"Fields must be in 'key=value' format. You provided: \"{pair}\"",
            )
        body[key] = unquote(value)

    if not body:
        raise ValidationError("No fields provided.", hint="You must provide at least one key=value pair.")
    return body
