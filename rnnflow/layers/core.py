"""Base class of learn layers."""
#  Copyright 2015-present Scikit Flow Authors. All Rights Reserved.
#
#  Licensed under the Apache License, Version 2.0 (the "License");
#  you may not use this file except in compliance with the License.
#  You may obtain a copy of the License at
#
#   http://www.apache.org/licenses/LICENSE-2.0
#
#  Unless required by applicable law or agreed to in writing, software
#  distributed under the License is distributed on an "AS IS" BASIS,
#  WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#  See the License for the specific language governing permissions and
#  limitations under the License.

from absl import logging
import tensorflow.compat.v1 as tf

from rnnflow.modes import Mode


class Layer(object):
    """Named, callable building block of a model graph.

    A layer is configured once and then called on its inputs, possibly many
    times. Every call opens a variable scope named after the layer, so any
    parameters created while the layer runs are grouped under its name,
    unless `opens_variable_scope` is turned off.
    Subclasses implement `forward`.
    """

    layer_type = "Layer"
    # Layers wrapping another layer leave their parameters in its scope.
    opens_variable_scope = True

    def __init__(self, name):
        if not name:
            raise ValueError("Layers must have a non-empty name.")
        self._name = name
        logging.vlog(1, "Created %s layer '%s'.", self.layer_type, name)

    @property
    def name(self):
        return self._name

    def __call__(self, inputs, mode=Mode.TRAINING):
        """Applies this layer to `inputs` in the variable scope of the layer.

        Args:
            inputs: Tensor or structure of tensors.
            mode: one of `Mode.ALL`; defaults to `Mode.TRAINING`.

        Returns:
            Whatever `forward` returns.
        """
        Mode.validate(mode)
        if not self.opens_variable_scope:
            return self.forward(inputs, mode)
        with tf.variable_scope(self._name):
            return self.forward(inputs, mode)

    def forward(self, inputs, mode):
        raise NotImplementedError("Abstract method")

    def __repr__(self):
        return "{0}(name={1!r})".format(type(self).__name__, self._name)
