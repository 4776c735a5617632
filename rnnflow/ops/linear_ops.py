"""Linear maps used inside RNN cells."""
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


def linear_parameters(input_size, output_size, bias_start=0.0,
                      dtype=tf.float32):
    """Creates the parameters of a linear map in the current variable scope.

    Args:
        input_size: int, the total size of the concatenated inputs.
        output_size: int, second dimension of the weight matrix.
        bias_start: starting value to initialize the bias; 0 by default.
        dtype: data type of the parameters.

    Returns:
        A pair `(matrix, bias)` of variables named `Matrix` and `Bias`.
    """
    matrix = tf.get_variable("Matrix", [input_size, output_size], dtype=dtype)
    bias = tf.get_variable(
        "Bias", [output_size], dtype=dtype,
        initializer=tf.constant_initializer(bias_start, dtype=dtype))
    return matrix, bias


def linear(args, matrix, bias):
    """Linear map: concat(args) * matrix + bias.

    Args:
        args: a 2D Tensor or a list of 2D, batch x n, Tensors.
        matrix: weight matrix created by `linear_parameters`.
        bias: bias vector created by `linear_parameters`.

    Returns:
        A 2D Tensor with shape [batch x output_size].

    Raises:
        ValueError: if args is an empty list.
    """
    if not isinstance(args, (list, tuple)):
        args = [args]
    if not args:
        raise ValueError("`args` must be specified.")
    if len(args) == 1:
        res = tf.matmul(args[0], matrix)
    else:
        res = tf.matmul(tf.concat(args, 1), matrix)
    return tf.nn.bias_add(res, bias)
