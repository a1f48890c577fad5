"""
Category Classifier

A multinomial naive Bayes model over token counts, trained once on a small
hand-written corpus of keywords and brand names per category.

The trained model is read-only. The service builds one at startup and
injects it; callers that don't inject anything share the instance held by
get_category_model().
"""

import threading
from types import MappingProxyType
from typing import Mapping, Optional

import structlog
from sklearn.feature_extraction.text import CountVectorizer
from sklearn.naive_bayes import MultinomialNB
from sklearn.pipeline import Pipeline

from spendlog.models.spending import CategoryPrediction, SpendingCategory

logger = structlog.get_logger(__name__)


# No OTHER documents: low-confidence results become OTHER in categorize().
TRAINING_CORPUS: Mapping[SpendingCategory, tuple[str, ...]] = MappingProxyType({
    SpendingCategory.COFFEE: (
        "coffee latte espresso cappuccino americano",
        "starbucks doutor tullys komeda coffee shop cafe",
        "matcha latte chai tea latte macchiato mocha",
        "iced coffee hot coffee coffee break coffee bean",
    ),
    SpendingCategory.DINING: (
        "restaurant lunch dinner breakfast brunch meal",
        "pizza burger sandwich sushi ramen curry noodles",
        "mcdonald mcdonalds kfc yoshinoya sukiya saizeriya restaurant",
        "izakaya bar dinner lunch drinks takeout delivery",
    ),
    SpendingCategory.GROCERIES: (
        "grocery groceries food supermarket market",
        "vegetables fruits meat fish bread milk eggs rice",
        "walmart costco target aeon seiyu groceries grocery store",
    ),
    SpendingCategory.TRANSPORTATION: (
        "transport bus train taxi uber lyft",
        "gasoline fuel parking toll subway",
        "car bike scooter metro station fare",
    ),
    SpendingCategory.SHOPPING: (
        "bought purchase shop mall store",
        "clothes shoes bag accessories shirt jacket",
        "amazon ebay online shopping uniqlo",
    ),
    SpendingCategory.ENTERTAINMENT: (
        "movie theater cinema concert game entertainment",
        "netflix spotify youtube disney subscription",
        "ticket show performance event karaoke",
    ),
    SpendingCategory.UTILITIES: (
        "electricity water gas internet phone",
        "bill payment utility service",
        "electric bill water bill phone bill internet bill",
    ),
    SpendingCategory.HEALTH: (
        "medicine pharmacy doctor hospital dentist",
        "vitamin supplement health care clinic",
    ),
    SpendingCategory.EDUCATION: (
        "book course class education study",
        "school university college tuition textbook",
    ),
    SpendingCategory.HOBBY: (
        "hobby craft art music instrument",
        "gym fitness workout exercise yoga",
    ),
})


class CategoryModel:
    """
    Trained text classifier mapping an utterance to spending categories.

    Build it with CategoryModel.train(); the fitted pipeline is never
    refitted afterwards, so one instance can be shared across threads.
    """

    def __init__(self, pipeline: Pipeline):
        self._pipeline = pipeline
        self._labels = tuple(SpendingCategory(label) for label in pipeline.classes_)

    @classmethod
    def train(
        cls,
        corpus: Mapping[SpendingCategory, tuple[str, ...]] = TRAINING_CORPUS,
    ) -> "CategoryModel":
        documents = []
        labels = []
        for category, samples in corpus.items():
            if category == SpendingCategory.OTHER:
                raise ValueError("the catch-all category cannot be trained")
            for sample in samples:
                documents.append(sample)
                labels.append(category.value)

        pipeline = Pipeline([
            ("counts", CountVectorizer(lowercase=True)),
            ("nb", MultinomialNB()),
        ])
        pipeline.fit(documents, labels)

        logger.info(
            "category_model_trained",
            categories=len(corpus),
            documents=len(documents),
        )
        return cls(pipeline)

    @property
    def labels(self) -> tuple[SpendingCategory, ...]:
        return self._labels

    def classifications(self, text: str) -> list[CategoryPrediction]:
        """Every trained label with its probability, most likely first."""
        probabilities = self._pipeline.predict_proba([text.lower()])[0]
        predictions = [
            CategoryPrediction(category=label, confidence=float(p))
            for label, p in zip(self._labels, probabilities)
        ]
        predictions.sort(key=lambda p: p.confidence, reverse=True)
        return predictions

    def classify(self, text: str) -> CategoryPrediction:
        return self.classifications(text)[0]


def categorize(
    model: CategoryModel,
    text: str,
    floor: float = 0.3,
) -> SpendingCategory:
    """Top category for the text, or OTHER when its probability is under the floor."""
    top = model.classify(text)
    if top.confidence < floor:
        logger.debug(
            "category_below_floor",
            category=top.category.value,
            confidence=round(top.confidence, 3),
        )
        return SpendingCategory.OTHER
    return top.category


_model: Optional[CategoryModel] = None
_model_lock = threading.Lock()


def get_category_model() -> CategoryModel:
    """Shared model, trained on first use exactly once."""
    global _model
    if _model is None:
        with _model_lock:
            if _model is None:
                _model = CategoryModel.train()
    return _model
