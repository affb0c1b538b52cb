"""Predicates about the signatures of commits in a pull request."""

from __future__ import annotations

from dataclasses import dataclass, field

from policybot.model import Actors, Commit, Predicate, PredicateResult, SignatureType, Trigger


def _get_commits(prctx):
    try:
        return prctx.commits()
    except Exception as exc:
        raise RuntimeError("failed to get commits") from exc


def _has_valid_signature(commit: Commit) -> tuple[bool, str]:
    if commit.signature is None:
        return False, f"Commit {commit.sha[:10]} has no signature"
    if not commit.signature.is_valid:
        return (
            False,
            f"Commit {commit.sha[:10]} has an invalid signature due to {commit.signature.state}",
        )
    return True, ""


@dataclass(frozen=True)
class HasValidSignatures(Predicate):
    """Satisfied when all commits are validly signed (or, with required=False, when one is not)."""

    required: bool = True

    def evaluate(self, prctx) -> PredicateResult:
        commits = _get_commits(prctx)
        result = PredicateResult(condition_phrase="have", condition_values=["valid signatures"])

        hashes: list[str] = []
        for commit in commits:
            valid, description = _has_valid_signature(commit)
            hashes.append(commit.sha)
            if not valid:
                result.values = [commit.sha]
                if self.required:
                    result.description = description
                    result.satisfied = False
                else:
                    result.satisfied = True
                return result

        result.values = hashes
        if self.required:
            result.satisfied = True
            return result
        result.satisfied = False
        result.description = "All commits are signed and have valid signatures"
        return result

    def trigger(self) -> Trigger:
        return Trigger.COMMIT


@dataclass
class HasValidSignaturesBy(Actors, Predicate):
    """Satisfied when all commits carry valid signatures by the actors."""

    def evaluate(self, prctx) -> PredicateResult:
        commits = _get_commits(prctx)
        result = PredicateResult(
            conditions_map={
                "Organizations": list(self.organizations),
                "Teams": list(self.teams),
                "Users": list(self.users),
            }
        )

        signers: dict[str, str] = {}
        hashes: list[str] = []
        for commit in commits:
            valid, description = _has_valid_signature(commit)
            if not valid:
                result.condition_phrase = "have valid signatures by members of"
                result.value_phrase = "commits"
                result.values = [commit.sha]
                result.description = description
                result.satisfied = False
                return result
            signers[commit.signature.signer] = commit.sha
            hashes.append(commit.sha)

        for signer in signers:
            if not self.is_actor(prctx, signer):
                result.condition_phrase = "satisfy the required membership conditions"
                result.values = [signer]
                result.value_phrase = "signers"
                result.description = (
                    f'Contributor "{signer}" does not meet the required membership '
                    "conditions for signing"
                )
                result.satisfied = False
                return result

        result.condition_phrase = "have valid signatures by members of"
        result.values = hashes
        result.value_phrase = "commits"
        result.satisfied = True
        return result

    def trigger(self) -> Trigger:
        return Trigger.COMMIT


@dataclass
class HasValidSignaturesByKeys(Predicate):
    """Satisfied when all commits carry valid GPG signatures by the listed keys."""

    key_ids: list[str] = field(default_factory=list)

    def evaluate(self, prctx) -> PredicateResult:
        commits = _get_commits(prctx)
        result = PredicateResult(
            condition_phrase="have valid signatures by keys",
            condition_values=list(self.key_ids),
        )

        keys: dict[str, list[str]] = {}
        hashes: list[str] = []
        for commit in commits:
            valid, description = _has_valid_signature(commit)
            if not valid:
                result.values = [commit.sha]
                result.description = description
                result.value_phrase = "commits"
                result.satisfied = False
                return result
            hashes.append(commit.sha)
            if commit.signature.type != SignatureType.GPG:
                result.values = [commit.sha]
                result.value_phrase = "commits"
                result.condition_phrase = "have GPG signatures"
                result.description = f"Commit {commit.sha[:10]} signature is not a GPG signature"
                result.satisfied = False
                return result
            keys.setdefault(commit.signature.key_id, []).append(commit.sha)

        for key in keys:
            if key not in self.key_ids:
                result.condition_phrase = "exist in the set of allowed keys"
                result.values = [key]
                result.value_phrase = "keys"
                result.description = (
                    f'Key "{key}" does not meet the required key conditions for signing'
                )
                result.satisfied = False
                return result

        result.values = hashes
        result.value_phrase = "commits"
        result.satisfied = True
        return result

    def trigger(self) -> Trigger:
        return Trigger.COMMIT