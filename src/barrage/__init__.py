__all__ = [
    "LoadRunner",
    "QuantileSketch",
    "WorkCounter",
    "RequestExecutor",
    "RequestTemplate",
    "ConfigurationError",
    "build_template",
    "RunReport",
]


from .core import LoadRunner
from .counter import WorkCounter
from .executor import RequestExecutor
from .models import RunReport
from .quantiles import QuantileSketch
from .template import ConfigurationError, RequestTemplate, build_template
