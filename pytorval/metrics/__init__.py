from pytorval.metrics.errors import (
    MetricError,
    InvalidArgumentError,
    TypeMismatchError,
    EmptyResultError,
)
from pytorval.metrics.activity import Activity, TensorBundle, as_single_tensor, is_tensor_bundle
from pytorval.metrics.base import Metric, ValidationResult, combine_results
from pytorval.metrics.accuracy import AccuracyResult, Top1Accuracy, TopKAccuracy, Top5Accuracy
from pytorval.metrics.loss import Loss, LossResult
