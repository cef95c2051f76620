SUMMARY_LENGTH = 32


def summarize(data: bytes, n: int = SUMMARY_LENGTH) -> str:
    '''Short printable representation of a payload: the text if it is
    printable UTF-8, the hexdump otherwise, truncated at n bytes.'''
    head = data[:n]
    ellipsis = '...' if len(data) > n else ''

    try:
        text = head.decode('utf-8')
    except UnicodeDecodeError:
        text = None

    if text is not None and text.isprintable():
        return f'{text!r}{ellipsis}'

    return f'{head.hex()}{ellipsis}'
