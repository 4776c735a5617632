"""TensorFlow ops for array / tensor manipulation."""
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

import tensorflow.compat.v1 as tf


def concatenate_structures(structure_a, structure_b, axis=-1, name=None):
    """Concatenates two nested structures of tensors leaf by leaf.

    Args:
        structure_a: Tensor or nested structure of tensors.
        structure_b: Tensor or nested structure of tensors with the same
            nesting as `structure_a`.
        axis: axis to concatenate the leaves on; the trailing (feature) axis
            by default.
        name: Optional name scope for the created ops.

    Returns:
        A structure like `structure_a` where each leaf is the concatenation
        of the corresponding leaves of `structure_a` and `structure_b`.

    Raises:
        ValueError: if the two structures are not isomorphic.
    """
    try:
        tf.nest.assert_same_structure(structure_a, structure_b)
    except (TypeError, ValueError) as e:
        raise ValueError("Cannot concatenate structures that do not match: "
                         "{0}".format(e))
    with tf.name_scope(name, "concatenate_structures",
                       tf.nest.flatten(structure_a) + tf.nest.flatten(structure_b)):
        return tf.nest.map_structure(
            lambda a, b: tf.concat([a, b], axis), structure_a, structure_b)
