"""Vector similarity helpers."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
	from collections.abc import Sequence


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
	"""
	Calculate the cosine similarity between two vectors.

	Vectors of different length or with a zero norm are not comparable and
	score 0.0 instead of raising.

	Args:
	    a: First vector
	    b: Second vector

	Returns:
	    Similarity in the range [-1, 1]

	"""
	if len(a) != len(b) or len(a) == 0:
		return 0.0

	vec_a = np.asarray(a, dtype=np.float64)
	vec_b = np.asarray(b, dtype=np.float64)

	norm_a = np.linalg.norm(vec_a)
	norm_b = np.linalg.norm(vec_b)
	if norm_a == 0 or norm_b == 0:
		return 0.0

	return float(np.dot(vec_a, vec_b) / (norm_a * norm_b))
