"""Service ports for machina."""

from machina.domain.ports.services.box_acquisition_port import BoxAcquisitionPort
from machina.domain.ports.services.component_source_port import ComponentSourcePort
from machina.domain.ports.services.specificity_ranker_port import SpecificityRankerPort

__all__ = ["BoxAcquisitionPort", "ComponentSourcePort", "SpecificityRankerPort"]
