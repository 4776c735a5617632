"""Recurrent layers running RNN cells over whole sequences."""
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
import numpy as np
import tensorflow.compat.v1 as tf

from rnnflow.layers.core import Layer
from rnnflow.ops import array_ops
from rnnflow.rnn_cell import RNNCell, Tuple


def _check_cell(arg_name, cell):
    if not isinstance(cell, RNNCell):
        raise TypeError("{0} must be an instance of RNNCell, got {1!r}.".format(
            arg_name, cell))


def _input_shape(inputs):
    """Static shape of the first input tensor, which carries the layout."""
    return tf.nest.flatten(inputs)[0].get_shape().with_rank_at_least(3)


def _sequence_lengths(sequence_lengths, input_shape, time_major):
    """Materializes `sequence_lengths` as an int32 vector.

    Raises:
        ValueError: if `sequence_lengths` is not a vector, or if it has a
            different static size than the batch dimension of the inputs.
    """
    if tf.is_tensor(sequence_lengths):
        lengths = tf.cast(sequence_lengths, tf.int32)
    else:
        lengths = tf.constant(np.asarray(sequence_lengths, dtype=np.int32),
                              dtype=tf.int32, name="sequence_lengths")
    num_lengths = lengths.get_shape().with_rank(1).as_list()[0]
    batch_size = input_shape.as_list()[1 if time_major else 0]
    if (num_lengths is not None and batch_size is not None and
            num_lengths != batch_size):
        raise ValueError(
            "Got {0} sequence lengths for a batch of {1} sequences.".format(
                num_lengths, batch_size))
    return lengths


class RNN(Layer):
    """Creates a dynamic RNN layer running a single cell over its inputs.

    Args:
        name: Name scope (also acting as variable scope) for this layer.
        cell: RNN cell to use.
        initial_state: Optional function with no arguments returning the
            initial state, a structure over tensors with shapes
            `[batch_size, state_size(i)]`. Defaults to a zero state.
        time_major: Whether the inputs are provided in time-major format
            (`[time, batch, depth]`) or in batch-major format
            (`[batch, time, depth]`).
        parallel_iterations: Number of RNN loop iterations allowed to run in
            parallel.
        swap_memory: If `True`, GPU-CPU memory swapping support is enabled
            for the RNN loop.
        sequence_lengths: Optional vector with shape `[batch_size]` containing
            the sequence lengths for each row in the batch.
    """

    layer_type = "RNN"

    def __init__(self, name, cell, initial_state=None, time_major=False,
                 parallel_iterations=32, swap_memory=False,
                 sequence_lengths=None):
        _check_cell("cell", cell)
        super(RNN, self).__init__(name)
        self.cell = cell
        self.initial_state = initial_state
        self.time_major = time_major
        self.parallel_iterations = parallel_iterations
        self.swap_memory = swap_memory
        self.sequence_lengths = sequence_lengths

    def forward(self, inputs, mode):
        inputs = tf.nest.map_structure(tf.convert_to_tensor, inputs)
        input_shape = _input_shape(inputs)
        state = None if self.initial_state is None else self.initial_state()
        lengths = None
        if self.sequence_lengths is not None:
            lengths = _sequence_lengths(
                self.sequence_lengths, input_shape, self.time_major)
        cell = self.cell.create_cell(mode, input_shape)
        output, state = tf.nn.dynamic_rnn(
            cell, inputs, sequence_length=lengths, initial_state=state,
            dtype=tf.nest.flatten(inputs)[0].dtype,
            parallel_iterations=self.parallel_iterations,
            swap_memory=self.swap_memory, time_major=self.time_major)
        return Tuple(output, state)


class BidirectionalRNN(Layer):
    """Creates a bidirectional dynamic RNN layer.

    The forward cell runs over the inputs as given and the backward cell
    runs over the inputs reversed in time (up to each row's sequence length,
    when lengths are provided). Calling the layer returns a pair
    `(Tuple(output_fw, state_fw), Tuple(output_bw, state_bw))`; the outputs
    of the backward direction are reversed back, so that both outputs are
    aligned in time. No merging is performed, see
    `with_concatenated_outputs`.

    Parameters of the forward cell are created under the variable scope
    `<name>/fw` and those of the backward cell under `<name>/bw`, the first
    time the layer is called.

    Args:
        name: Name scope (also acting as variable scope) for this layer.
        cell_fw: RNN cell to use for the forward direction.
        cell_bw: RNN cell to use for the backward direction.
        initial_state_fw: Optional function with no arguments returning the
            initial state of the forward RNN, a structure over tensors with
            shapes `[batch_size, state_size(i)]`. Defaults to a zero state.
        initial_state_bw: Same as `initial_state_fw`, for the backward RNN.
        time_major: Whether the inputs are provided in time-major format
            (`[time, batch, depth]`) or in batch-major format
            (`[batch, time, depth]`).
        parallel_iterations: Number of RNN loop iterations allowed to run in
            parallel.
        swap_memory: If `True`, GPU-CPU memory swapping support is enabled
            for the RNN loop.
        sequence_lengths: Optional vector (list, numpy array or tensor) with
            shape `[batch_size]` containing the sequence lengths for each
            row in the batch.

    Raises:
        TypeError: if `cell_fw` or `cell_bw` is not an RNNCell.
    """

    layer_type = "BidirectionalRNN"

    def __init__(self, name, cell_fw, cell_bw,
                 initial_state_fw=None, initial_state_bw=None,
                 time_major=False, parallel_iterations=32, swap_memory=False,
                 sequence_lengths=None):
        _check_cell("cell_fw", cell_fw)
        _check_cell("cell_bw", cell_bw)
        super(BidirectionalRNN, self).__init__(name)
        self.cell_fw = cell_fw
        self.cell_bw = cell_bw
        self.initial_state_fw = initial_state_fw
        self.initial_state_bw = initial_state_bw
        self.time_major = time_major
        self.parallel_iterations = parallel_iterations
        self.swap_memory = swap_memory
        self.sequence_lengths = sequence_lengths
        logging.vlog(1, "Bidirectional layer '%s': time_major=%s, "
                     "parallel_iterations=%d, swap_memory=%s.", name,
                     time_major, parallel_iterations, swap_memory)

    def forward(self, inputs, mode):
        inputs = tf.nest.map_structure(tf.convert_to_tensor, inputs)
        input_shape = _input_shape(inputs)
        state_fw = None
        if self.initial_state_fw is not None:
            state_fw = self.initial_state_fw()
        state_bw = None
        if self.initial_state_bw is not None:
            state_bw = self.initial_state_bw()
        lengths = None
        if self.sequence_lengths is not None:
            lengths = _sequence_lengths(
                self.sequence_lengths, input_shape, self.time_major)
        with tf.variable_scope("fw"):
            cell_fw = self.cell_fw.create_cell(mode, input_shape)
        with tf.variable_scope("bw"):
            cell_bw = self.cell_bw.create_cell(mode, input_shape)
        outputs, states = tf.nn.bidirectional_dynamic_rnn(
            cell_fw, cell_bw, inputs, sequence_length=lengths,
            initial_state_fw=state_fw, initial_state_bw=state_bw,
            dtype=tf.nest.flatten(inputs)[0].dtype,
            parallel_iterations=self.parallel_iterations,
            swap_memory=self.swap_memory, time_major=self.time_major)
        return Tuple(outputs[0], states[0]), Tuple(outputs[1], states[1])

    def with_concatenated_outputs(self):
        """Returns a layer concatenating the outputs of both directions.

        The returned layer calls this one and concatenates the forward and
        backward outputs along their last axis, leaf by leaf. It returns
        `Tuple(output, (state_fw, state_bw))`.
        """
        return BidirectionalRNNWithConcatenatedOutputs(self)


class BidirectionalRNNWithConcatenatedOutputs(Layer):
    """Bidirectional RNN layer whose outputs are depth-concatenated."""

    layer_type = "BidirectionalRNNWithConcatenatedOutputs"
    opens_variable_scope = False

    def __init__(self, layer):
        super(BidirectionalRNNWithConcatenatedOutputs, self).__init__(
            "{0}/ConcatenatedOutputs".format(layer.name))
        self._layer = layer

    def forward(self, inputs, mode):
        raw_fw, raw_bw = self._layer(inputs, mode)
        output = array_ops.concatenate_structures(
            raw_fw.output, raw_bw.output, axis=-1, name="ConcatenatedOutputs")
        return Tuple(output, (raw_fw.state, raw_bw.state))
