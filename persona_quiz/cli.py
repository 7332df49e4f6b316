from __future__ import annotations

import argparse
import logging
from typing import Callable

from config import LLM_PROVIDER, LOG_LEVEL, QUESTION_COUNT
from .controller import QuizController
from . import ledger
from .ledger import InvalidAnswerError
from .models import CATEGORY_OPTIONS, LIKERT_LABELS, CompatibilityResult, PersonalityResult
from .services.assessment_service import AssessmentService
from .services.llm_service import create_service
from .services.session_store import SessionStore
from .session import Mode, Participant, Phase, SessionState

SESSION_ID = "cli"


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Take an AI-generated personality quiz in the terminal, alone or as a pair."
    )
    parser.add_argument(
        "--mode",
        choices=[m.value for m in Mode],
        default=Mode.INDIVIDUAL.value,
        help="individual report or two-person compatibility (default: individual)",
    )
    parser.add_argument(
        "--provider",
        choices=["gemini", "openai"],
        default=LLM_PROVIDER,
        help=f"LLM provider to use (default: {LLM_PROVIDER})",
    )
    parser.add_argument(
        "--questions",
        type=int,
        default=QUESTION_COUNT,
        help=f"Number of statements to generate (default: {QUESTION_COUNT})",
    )
    return parser.parse_args(argv)


def _ask(prompt: str, valid: Callable[[str], bool], read: Callable[[str], str]) -> str:
    while True:
        value = read(prompt).strip()
        if valid(value):
            return value
        print("  Please try again.")


def _read_profile(
    controller: QuizController,
    participant: Participant,
    title: str,
    read: Callable[[str], str],
) -> None:
    print(f"\n{title}")
    name = _ask("  Name: ", bool, read)
    age = _ask("  Age: ", str.isdigit, read)
    for index, option in enumerate(CATEGORY_OPTIONS, start=1):
        print(f"    {index}. {option}")
    choice = _ask("  Sex: ", lambda v: v.isdigit() and 1 <= int(v) <= len(CATEGORY_OPTIONS), read)

    controller.edit_profile(SESSION_ID, participant, "name", name)
    controller.edit_profile(SESSION_ID, participant, "age", age)
    controller.edit_profile(SESSION_ID, participant, "category", CATEGORY_OPTIONS[int(choice) - 1])


def _answer_questions(controller: QuizController, state: SessionState, read: Callable[[str], str]) -> SessionState:
    scale = "  ".join(f"{value}={label}" for value, label in LIKERT_LABELS.items())
    print(f"\nAnswering as: {state.active_profile.name}")
    print(f"  {scale}  (b = back)")
    while not ledger.is_ready(state.questions, state.active_answers):
        question = state.current_question
        current = state.active_answers.get(question.id)
        marker = f" [{current}]" if current else ""
        value = read(f"\n{state.current_index + 1}/{len(state.questions)} {question.text}{marker}\n> ").strip().lower()
        if value == "b":
            state = controller.back(SESSION_ID)
            continue
        try:
            controller.answer(SESSION_ID, question.id, int(value))
        except (ValueError, InvalidAnswerError):
            print("  Answer with a number from 1 to 5.")
            continue
        state = controller.advance(SESSION_ID)
    return controller.complete(SESSION_ID)


def _print_personality(result: PersonalityResult) -> None:
    print(f"\n=== {result.archetype} ===")
    print(f'"{result.summary}"\n')
    for trait in result.traits:
        print(f"  {trait.label:<24} {trait.score:>3}%  {trait.description}")
    print(f"\n{result.detailed_analysis}")


def _print_compatibility(result: CompatibilityResult) -> None:
    print(f"\n=== {result.relationship_archetype} ({result.compatibility_score}%) ===")
    print(f"\nSynergy:\n{result.synergy_analysis}")
    print(f"\nChallenges:\n{result.challenges}\n")
    for dim in result.dimensions:
        print(f"  {dim.label:<24} {dim.score_user1:>3}% vs {dim.score_user2:>3}%  {dim.insight}")


def run(controller: QuizController, mode: Mode, read: Callable[[str], str] = input) -> SessionState:
    """Play one full session; returns the final state."""
    controller.select_mode(SESSION_ID, mode)
    comparison = mode is Mode.COMPARISON
    _read_profile(controller, Participant.A, "Person One" if comparison else "Your Profile", read)
    if comparison:
        _read_profile(controller, Participant.B, "Person Two", read)

    print("\nConsulting AI Psychologist...")
    state = controller.submit(SESSION_ID)
    while state.phase is Phase.ANSWERING:
        state = _answer_questions(controller, state, read)

    if state.phase is Phase.RESULTS:
        if state.individual_result:
            _print_personality(state.individual_result)
        else:
            _print_compatibility(state.compatibility_result)
    elif state.notice:
        print(f"\n{state.notice}")
    return state


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(level=LOG_LEVEL, format="%(levelname)s %(name)s: %(message)s")

    if args.questions < 1:
        raise SystemExit("--questions must be at least 1")

    assessment = AssessmentService(llm_service=create_service(args.provider), question_count=args.questions)
    controller = QuizController(assessment=assessment, store=SessionStore())
    state = run(controller, Mode(args.mode))
    if state.phase is not Phase.RESULTS:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
