class ChainPrefix:
    """
    A fixed-length window over the last N tokens seen by a Markov chain.

    The prefix is used as the transition table key (see `to_key`) and is
    advanced in place with `shift`. Its length is set once and never changes.
    """

    SEPARATOR = " "

    def __init__(self, length):
        """
        Initializes the prefix with `length` empty-string placeholders.

        Args:
            length (int): The number of tokens held by the prefix (N >= 1).
        """
        self._tokens = [""] * length

    @classmethod
    def from_tokens(cls, tokens, length):
        """
        Builds a prefix of `length` tokens from a caller-supplied seed.

        Args:
            tokens (iterable of str): The seed context, oldest token first.
            length (int): The prefix length of the chain being queried.

        Returns:
            ChainPrefix: A new prefix that does not alias `tokens`.

        Example:
            >>> ChainPrefix.from_tokens(["a", "noisy", "oyster"], 2).tokens
            ('noisy', 'oyster')
            >>> ChainPrefix.from_tokens(["oyster"], 3).tokens
            ('', '', 'oyster')
        """
        tokens = list(tokens)
        prefix = cls(length)
        if len(tokens) > length:
            # Keep the most recent tokens only
            prefix._tokens = tokens[len(tokens) - length:]
        elif len(tokens) < length:
            # Left-pad so the seed sits at the end of the window
            prefix._tokens = [""] * (length - len(tokens)) + tokens
        else:
            prefix._tokens = tokens
        return prefix

    @property
    def tokens(self):
        """tuple: A snapshot of the current window, oldest token first."""
        return tuple(self._tokens)

    def to_key(self):
        """
        Serializes the prefix into a transition table key.

        Tokens are joined with a single space and are not escaped, so a token
        that itself contains a space can collide with a different context.

        Returns:
            str: The space-joined tokens.
        """
        return self.SEPARATOR.join(self._tokens)

    def shift(self, token):
        """
        Drops the oldest token and appends `token`, keeping the length fixed.

        Args:
            token (str): The token to append as the most recent entry.
        """
        if len(self._tokens) == 1:
            self._tokens[0] = token
        else:
            del self._tokens[0]
            self._tokens.append(token)

    def __len__(self):
        return len(self._tokens)

    def __str__(self):
        return self.to_key()

    def __repr__(self):
        return f"ChainPrefix({self._tokens!r})"

    def __eq__(self, other):
        if isinstance(other, ChainPrefix):
            return self._tokens == other._tokens
        if isinstance(other, (list, tuple)):
            return self._tokens == list(other)
        return NotImplemented

    __hash__ = None
