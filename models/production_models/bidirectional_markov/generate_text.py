#!/usr/bin/env python3
"""
Bidirectional Markov Text Generation Script

Builds a BidirectionalMarkovChain from one or more corpus files and prints
generated text, walking the chain forwards or backwards, optionally starting
from a seed phrase.

Corpus files:
    - `.csv`: the first column is read with pandas, one document per row.
    - anything else: the whole file is one document.

Each document is built into the chain separately, so every document start
(forward) and end (backward) is a possible starting point.

Example:
    bimarkov-generate --corpus corpus.txt --prefix-length 1 --seed-text "What noise"
    bimarkov-generate --corpus reviews.csv --direction backward --seed-text "the end."
"""
import os
import sys
import random
import argparse

import pandas as pd

from models.base_models.bidirectional_markov_chain import BidirectionalMarkovChain
from models.nlps.text_preprocessor import TextPreprocessor
from utils.config_loader import load_generation_config
from utils.loggers.json_logger import get_logger
from utils.system_monitoring import ResourceMonitor

DIRECTIONS = ("forward", "backward")


class MarkovTextGenerator:
    """
    Loads corpora, builds the chain and assembles generated text.

    The generator is the caller of the chain, so it decides how seeds are
    oriented: for backward generation the seed tokens are reversed to match
    the backward table, and the produced tokens are reversed again so the
    output reads left to right.
    """

    def __init__(self, prefix_length=2, direction="forward", max_tokens=50,
                 lowercase=False, strip_urls=False, strip_html=False,
                 random_seed=None, csv_header=None, memory_limit_percentage=85,
                 logger=None, preprocessor=None, resource_monitor=None):
        """
        Initialize the generator with specified parameters.

        Args:
            prefix_length (int): Tokens per chain prefix
            direction (str): 'forward' or 'backward'
            max_tokens (int): Upper bound on generated tokens per text
            lowercase (bool): Lowercase the corpus and seed text
            strip_urls (bool): Remove URLs from the corpus and seed text
            strip_html (bool): Remove HTML tags from the corpus and seed text
            random_seed (int, optional): Seed for a private random.Random;
                the process-wide generator is used when omitted
            csv_header (int, optional): Header row passed to pandas.read_csv
            memory_limit_percentage (int): Memory limit for the build phase
            logger (logging.Logger, optional): Logger instance
            preprocessor (TextPreprocessor, optional): Text cleaner/tokenizer
            resource_monitor (ResourceMonitor, optional): Resource tracker

        Raises:
            ValueError: If `direction` is unknown or `prefix_length` is invalid
        """
        self.logger = logger if logger is not None else get_logger("bimarkov_generate")

        if direction not in DIRECTIONS:
            error_msg = f"direction must be one of {DIRECTIONS}, got {direction!r}"
            self.logger.error(error_msg)
            raise ValueError(error_msg)

        self.direction = direction
        self.max_tokens = max_tokens
        self.lowercase = lowercase
        self.strip_urls = strip_urls
        self.strip_html = strip_html
        self.random_seed = random_seed
        self.csv_header = csv_header

        self.preprocessor = preprocessor if preprocessor is not None else TextPreprocessor()
        self.resource_monitor = resource_monitor if resource_monitor is not None else ResourceMonitor(
            logger=self.logger,
            memory_limit_percentage=memory_limit_percentage
        )

        rng = random.Random(random_seed) if random_seed is not None else None
        self.chain = BidirectionalMarkovChain(prefix_length, rng=rng, logger=self.logger)

        self.logger.info("MarkovTextGenerator initialized", extra={
            "metrics": {
                "prefix_length": prefix_length,
                "direction": direction,
                "max_tokens": max_tokens,
                "random_seed": random_seed
            }
        })

    @classmethod
    def from_config(cls, config, logger=None):
        """
        Create a generator from a configuration mapping.

        Args:
            config (dict): Settings as returned by load_generation_config
            logger (logging.Logger, optional): Logger instance

        Returns:
            MarkovTextGenerator: The configured generator
        """
        return cls(
            prefix_length=config["prefix_length"],
            direction=config["direction"],
            max_tokens=config["max_tokens"],
            lowercase=config["lowercase"],
            strip_urls=config["strip_urls"],
            strip_html=config["strip_html"],
            random_seed=config["random_seed"],
            csv_header=config.get("csv_header"),
            memory_limit_percentage=config["memory_limit_percentage"],
            logger=logger
        )

    def _clean(self, text):
        return self.preprocessor.preprocess(
            text,
            lowercase=self.lowercase,
            strip_urls=self.strip_urls,
            strip_html=self.strip_html
        )

    def load_documents(self, file_path):
        """
        Read the documents contained in a corpus file.

        Args:
            file_path (str): Path to a .csv or plain text file

        Returns:
            list of str: Raw documents, or an empty list if the file is missing
                or cannot be read
        """
        if not os.path.exists(file_path):
            self.logger.error(f"Corpus file not found: {file_path}")
            return []

        try:
            if os.path.splitext(file_path)[1].lower() == ".csv":
                df = pd.read_csv(file_path, encoding="UTF-8", header=self.csv_header)
                documents = df.iloc[:, 0].tolist()
            else:
                with open(file_path, "r", encoding="utf-8") as f:
                    documents = [f.read()]
        except (OSError, UnicodeDecodeError, pd.errors.EmptyDataError, pd.errors.ParserError) as e:
            self.logger.error(f"Error reading corpus file {file_path}: {str(e)}", extra={
                "metrics": {"file_path": file_path, "error_type": type(e).__name__}
            })
            return []

        self.logger.info(f"Loaded corpus: {file_path}", extra={
            "metrics": {"file_path": file_path, "documents": len(documents)}
        })
        return documents

    def build(self, file_paths):
        """
        Build the chain from every document in `file_paths` and seal it.

        Args:
            file_paths (list of str): Corpus files

        Returns:
            dict: Chain statistics after the build

        Raises:
            ValueError: If no tokens could be read from any file
        """
        self.resource_monitor.start("chain_build")

        try:
            total_tokens = 0
            for file_path in file_paths:
                for document in self.load_documents(file_path):
                    tokens = self.preprocessor.tokenize(self._clean(document))
                    if tokens:
                        total_tokens += self.chain.build(tokens)

            if total_tokens == 0:
                error_msg = "No corpus text loaded"
                self.logger.error(error_msg, extra={"metrics": {"file_paths": list(file_paths)}})
                raise ValueError(error_msg)

            self.chain.seal()
            statistics = self.chain.get_statistics()
            statistics["total_tokens"] = total_tokens

            self.resource_monitor.log_progress(
                "Chain build completed",
                operation="chain_build",
                extra_metrics=statistics
            )
        finally:
            self.resource_monitor.stop()

        return statistics

    def generate(self, seed_text=None):
        """
        Generate one text by walking the chain in the configured direction.

        Args:
            seed_text (str, optional): Phrase to continue (forward) or to
                lead into (backward). It is included in the output.

        Returns:
            str: The generated text, in reading order
        """
        seed = self.preprocessor.tokenize(self._clean(seed_text)) if seed_text else []

        if self.direction == "forward":
            if seed:
                generation = self.chain.generate_forward_from_prefix(seed)
            else:
                generation = self.chain.generate_forward()
            tokens = seed + generation.take(self.max_tokens)
        else:
            if seed:
                generation = self.chain.generate_backward_from_prefix(seed[::-1])
            else:
                generation = self.chain.generate_backward()
            tokens = generation.take(self.max_tokens)[::-1] + seed

        text = self.preprocessor.detokenize(tokens)

        self.logger.info("Text generation completed", extra={
            "metrics": {
                "direction": self.direction,
                "seed": seed_text,
                "words_generated": len(tokens) - len(seed),
                "text": text[:500] + ("..." if len(text) > 500 else "")
            }
        })

        return text


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Generate text from a bidirectional Markov chain built over corpus files.")
    parser.add_argument('--corpus', nargs='+', required=True,
                        help='Corpus files (.csv first column, or plain text)')
    parser.add_argument('--seed-text', default=None,
                        help='Phrase to continue (forward) or lead into (backward)')
    parser.add_argument('--direction', choices=DIRECTIONS, default=None,
                        help='Walk the chain forward or backward')
    parser.add_argument('--prefix-length', type=int, default=None,
                        help='Number of tokens per chain prefix')
    parser.add_argument('--max-tokens', type=int, default=None,
                        help='Maximum number of generated tokens per text')
    parser.add_argument('--count', type=int, default=1,
                        help='Number of texts to generate')
    parser.add_argument('--random-seed', type=int, default=None,
                        help='Seed for reproducible generation')
    parser.add_argument('--lowercase', action='store_true', default=None,
                        help='Lowercase corpus and seed text')
    parser.add_argument('--strip-urls', action='store_true', default=None,
                        help='Remove URLs from corpus and seed text')
    parser.add_argument('--strip-html', action='store_true', default=None,
                        help='Remove HTML tags from corpus and seed text')
    parser.add_argument('--environment', default='development',
                        help='Selects configs/generation_<environment>.yaml')
    parser.add_argument('--config-dir', default=None,
                        help='Directory holding the generation YAML files')
    parser.add_argument('--log-file', default=None,
                        help='Also write JSON logs to this file')
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)

    logger = get_logger(f"bimarkov_generate_{args.environment}")
    config = load_generation_config(
        environment=args.environment, config_dir=args.config_dir, logger=logger)

    overrides = {
        "direction": args.direction,
        "prefix_length": args.prefix_length,
        "max_tokens": args.max_tokens,
        "random_seed": args.random_seed,
        "lowercase": args.lowercase,
        "strip_urls": args.strip_urls,
        "strip_html": args.strip_html,
        "log_file": args.log_file,
    }
    config.update({key: value for key, value in overrides.items() if value is not None})

    if config["log_file"]:
        logger = get_logger(f"bimarkov_generate_{args.environment}", log_file=config["log_file"])

    try:
        generator = MarkovTextGenerator.from_config(config, logger=logger)
        generator.build(args.corpus)
    except ValueError as e:
        logger.error(f"Text generation aborted: {e}")
        return 1

    for _ in range(args.count):
        print(generator.generate(args.seed_text))

    return 0


if __name__ == "__main__":
    sys.exit(main())
