import random


class Generation:
    """
    A cursor that walks one transition table of a BidirectionalMarkovChain.

    The table is shared with the chain and only ever read here. The prefix is
    owned by the cursor, so several generations over the same chain advance
    independently of each other.
    """

    def __init__(self, table, prefix, rng=None):
        """
        Args:
            table (dict): Serialized prefix -> list of successor tokens.
            prefix (ChainPrefix): The starting context, owned by this cursor.
            rng (random.Random, optional): Source of randomness for `next`.
                Defaults to the process-wide `random` module.
        """
        self._table = table
        self._prefix = prefix
        self._rng = rng if rng is not None else random

    @property
    def prefix(self):
        """tuple: The current context, oldest token first."""
        return self._prefix.tokens

    def next(self):
        """
        Advances the cursor by one randomly selected successor.

        Successors are stored with duplicates, so picking a uniform index makes
        each distinct token as likely as its observed frequency.

        Returns:
            str: The chosen token, or "" when the current context has no
            recorded successor. The prefix is not shifted in that case.
        """
        suffixes = self._table.get(self._prefix.to_key())
        if not suffixes:
            return ""

        token = suffixes[self._rng.randrange(len(suffixes))]
        self._prefix.shift(token)
        return token

    def next_with(self, token):
        """
        Shifts the cursor by `token` whether or not the chain ever saw it here.

        Args:
            token (str): The token to force into the context.
        """
        self._prefix.shift(token)

    def options(self):
        """
        Returns the successors recorded for the current context.

        Returns:
            list of str: A copy of the successor list, duplicates included and
            in recorded order, or an empty list for an unknown context.
        """
        return list(self._table.get(self._prefix.to_key(), ()))

    def take(self, max_tokens):
        """
        Calls `next` up to `max_tokens` times, stopping at the end of the chain.

        Args:
            max_tokens (int): Upper bound on the number of tokens produced.

        Returns:
            list of str: The produced tokens, without the "" terminator.
        """
        tokens = []
        for _ in range(max_tokens):
            token = self.next()
            if token == "":
                break
            tokens.append(token)
        return tokens

    def __iter__(self):
        # Unbounded when the chain contains a cycle
        while True:
            token = self.next()
            if token == "":
                return
            yield token

    def __repr__(self):
        return f"Generation(prefix={self._prefix.tokens!r})"
