import logging
import random

from models.base_models.chain_prefix import ChainPrefix
from models.base_models.generation import Generation


class ChainSealedError(ValueError):
    """Raised when `build` is called on a chain that has been sealed."""


class BidirectionalMarkovChain:
    """
    A word-level Markov chain that can be walked forwards and backwards.

    Two independent transition tables are kept:
    - `forward`: built by scanning the tokens left to right.
    - `backward`: built by scanning the same tokens right to left.

    Each table maps a serialized prefix of `prefix_length` tokens to the list
    of tokens observed right after it. Duplicates are kept, so a token's share
    of the list is its observed frequency.

    Example:
        >>> chain = BidirectionalMarkovChain(prefix_length=1)
        >>> chain.build("What noise annoys a noisy oyster?".split())
        6
        >>> chain.generate_forward_from_prefix(["noise"]).options()
        ['annoys']
    """

    def __init__(self, prefix_length, rng=None, logger=None):
        """
        Initializes an empty chain.

        Args:
            prefix_length (int): Number of tokens per prefix (must be >= 1).
            rng (random.Random, optional): Random source handed to every
                Generation. Defaults to the process-wide `random` module.
            logger (logging.Logger, optional): Logger for chain activity.

        Raises:
            ValueError: If `prefix_length` is not a positive integer.
        """
        self.logger = logger if logger is not None else logging.getLogger(__name__)

        if isinstance(prefix_length, bool) or not isinstance(prefix_length, int) or prefix_length < 1:
            error_msg = f"prefix_length must be a positive integer, got {prefix_length!r}"
            self.logger.error(error_msg, extra={
                "metrics": {"prefix_length": repr(prefix_length)}
            })
            raise ValueError(error_msg)

        self._prefix_length = prefix_length
        self._rng = rng if rng is not None else random
        self._sealed = False

        self.forward = {}
        self.backward = {}

        self.logger.debug("BidirectionalMarkovChain initialized", extra={
            "metrics": {
                "prefix_length": prefix_length,
                "rng": "injected" if rng is not None else "global",
            }
        })

    @property
    def prefix_length(self):
        return self._prefix_length

    @property
    def sealed(self):
        return self._sealed

    def seal(self):
        """
        Marks the chain read-only. Later `build` calls raise ChainSealedError.
        """
        self._sealed = True
        self.logger.debug("Chain sealed", extra={"metrics": self.get_statistics()})

    def build(self, tokens):
        """
        Adds a token sequence to both transition tables.

        Both scans start from an all-empty prefix, so the empty key collects
        the first token of every sequence (forward) and the last token of
        every sequence (backward). Calling `build` again appends to the
        existing tables.

        Args:
            tokens (iterable of str): The token sequence, in reading order.

        Returns:
            int: The number of tokens consumed.

        Raises:
            ChainSealedError: If the chain has been sealed.
        """
        if self._sealed:
            raise ChainSealedError("Cannot build on a sealed chain")

        tokens = list(tokens)
        forward_prefix = ChainPrefix(self._prefix_length)
        backward_prefix = ChainPrefix(self._prefix_length)
        last = len(tokens) - 1

        for i, token in enumerate(tokens):
            # Forward chain
            self.forward.setdefault(forward_prefix.to_key(), []).append(token)
            forward_prefix.shift(token)

            # Backward chain
            reverse_token = tokens[last - i]
            self.backward.setdefault(backward_prefix.to_key(), []).append(reverse_token)
            backward_prefix.shift(reverse_token)

        self.logger.debug("Chain build completed", extra={
            "metrics": {
                "tokens_consumed": len(tokens),
                "forward_states": len(self.forward),
                "backward_states": len(self.backward),
            }
        })

        return len(tokens)

    def generate_forward(self):
        """Returns a Generation over the forward table from an empty prefix."""
        return self._generation(self.forward, ChainPrefix(self._prefix_length))

    def generate_forward_from_prefix(self, seed):
        """
        Returns a Generation over the forward table starting from `seed`.

        A seed longer than `prefix_length` keeps only its last tokens; a
        shorter one is left-padded with empty strings.

        Args:
            seed (iterable of str): Context tokens, oldest first.

        Returns:
            Generation: A cursor with its own copy of the context.
        """
        return self._generation(self.forward, ChainPrefix.from_tokens(seed, self._prefix_length))

    def generate_backward(self):
        """Returns a Generation over the backward table from an empty prefix."""
        return self._generation(self.backward, ChainPrefix(self._prefix_length))

    def generate_backward_from_prefix(self, seed):
        """
        Returns a Generation over the backward table starting from `seed`.

        The seed is truncated or padded exactly like in
        `generate_forward_from_prefix` and is not reversed. Backward keys are
        recorded in reverse reading order, so a caller that wants to walk back
        from the phrase "noisy oyster." passes ["oyster.", "noisy"].

        Args:
            seed (iterable of str): Context tokens in backward-table order.

        Returns:
            Generation: A cursor with its own copy of the context.
        """
        return self._generation(self.backward, ChainPrefix.from_tokens(seed, self._prefix_length))

    def _generation(self, table, prefix):
        return Generation(table, prefix, rng=self._rng)

    def get_statistics(self):
        """
        Summarizes the size of both transition tables.

        Returns:
            dict: State and transition counts per direction.
        """
        return {
            "prefix_length": self._prefix_length,
            "forward_states": len(self.forward),
            "backward_states": len(self.backward),
            "forward_transitions": sum(len(suffixes) for suffixes in self.forward.values()),
            "backward_transitions": sum(len(suffixes) for suffixes in self.backward.values()),
            "sealed": self._sealed,
        }


def new_chain(prefix_length, rng=None, logger=None):
    """
    Creates an empty BidirectionalMarkovChain.

    Args:
        prefix_length (int): Number of tokens per prefix (must be >= 1).
        rng (random.Random, optional): Random source for generation.
        logger (logging.Logger, optional): Logger for chain activity.

    Returns:
        BidirectionalMarkovChain: The new chain.
    """
    return BidirectionalMarkovChain(prefix_length, rng=rng, logger=logger)
