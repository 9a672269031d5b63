"""
Client for the text-generation service that turns a corpus into a
title, a list of categories and an abstract.
"""

import json
import logging

import openai
from openai import OpenAI

from warc_errors import CollaboratorResponseInvalid, CollaboratorUnavailable

DEFAULT_MODEL = "gpt-4-1106-preview"
DEFAULT_TEMPERATURE = 0
DEFAULT_SEED = 11


def load_prompts(file_path):
    """
    Read the prompt file.

    :param file_path: path to a JSON file {"system": str, "examples": [{"user": str, "assistant": str}]}
    :return: the parsed prompt dict
    """
    with open(file_path, "r", encoding="utf-8") as f:
        prompts = json.load(f)
    if "system" not in prompts:
        raise ValueError(f"Prompt file {file_path} has no 'system' entry")
    prompts.setdefault("examples", [])
    logging.debug(f"Loaded {len(prompts['examples'])} few-shot examples from {file_path}")
    return prompts


def build_messages(prompts, corpus):
    system_prompt = prompts["system"]
    messages = [{"role": "system", "content": system_prompt}]
    for example in prompts["examples"]:
        messages.append({"role": "user", "content": example["user"]})
        messages.append({"role": "assistant", "content": example["assistant"]})
    # The instruction is repeated right before the corpus
    messages.append({"role": "system", "content": system_prompt})
    messages.append({"role": "user", "content": corpus})
    return messages


class Summarizer:
    def __init__(self, client, prompts, model=DEFAULT_MODEL,
                 temperature=DEFAULT_TEMPERATURE, seed=DEFAULT_SEED):
        """
        Created once per process and shared read-only between requests.

        :param client: an openai.OpenAI client (or anything with the same chat.completions API)
        :param prompts: dict as returned by load_prompts()
        """
        self.client = client
        self.prompts = prompts
        self.model = model
        self.temperature = temperature
        self.seed = seed

    @classmethod
    def from_config(cls, config):
        try:
            client = OpenAI(max_retries=0)
        except openai.OpenAIError as e:
            # e.g. OPENAI_API_KEY is not set
            raise CollaboratorUnavailable(f"Cannot create OpenAI client: {e}") from e
        return cls(
            client,
            load_prompts(config["prompt_file"]),
            model=config.get("model", DEFAULT_MODEL),
            temperature=config.get("temperature", DEFAULT_TEMPERATURE),
            seed=config.get("seed", DEFAULT_SEED),
        )

    def summarize(self, corpus):
        """
        Ask the model for a JSON summary of the corpus.

        :param corpus: the annotated text produced by extract_and_concatenate()
        :return: the decoded JSON object, unvalidated
        :raises CollaboratorUnavailable: if the API call fails
        :raises CollaboratorResponseInvalid: if the reply is missing or not JSON
        """
        logging.info(f"Requesting summary from {self.model} for {len(corpus)} characters")
        try:
            completion = self.client.chat.completions.create(
                messages=build_messages(self.prompts, corpus),
                model=self.model,
                temperature=self.temperature,
                seed=self.seed,
                response_format={"type": "json_object"},
            )
        except openai.OpenAIError as e:
            logging.error(f"Summarization request failed: {e}")
            raise CollaboratorUnavailable(f"Summarization request failed: {e}") from e

        json_string = None
        if completion.choices:
            json_string = completion.choices[0].message.content
        if not json_string:
            raise CollaboratorResponseInvalid("The model did not return JSON")

        try:
            return json.loads(json_string)
        except json.JSONDecodeError as e:
            logging.error(f"Unparseable model output: {json_string[:200]!r}")
            raise CollaboratorResponseInvalid(f"The model returned invalid JSON: {e}") from e
