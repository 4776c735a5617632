"""Module for constructing RNN cells."""
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

import collections

from absl import logging
import tensorflow.compat.v1 as tf

from rnnflow.modes import Mode
from rnnflow.ops.linear_ops import linear, linear_parameters


# Output emitted by a cell paired with the state it carries forward.
Tuple = collections.namedtuple("Tuple", ["output", "state"])

LSTMState = collections.namedtuple("LSTMState", ["c", "h"])


def _input_depth(input_shape):
    """Returns the statically known size of the last dimension."""
    depth = tf.TensorShape(input_shape).with_rank_at_least(2).as_list()[-1]
    if depth is None:
        raise ValueError("The last dimension of the inputs must be known, "
                         "saw shape {0}.".format(input_shape))
    return depth


class RNNCell(object):
    """Abstract object representing an RNN cell.

    An RNN cell, in the most abstract setting, is anything that has
    a state -- a structure of vectors of sizes self.state_size -- and
    performs some operation that takes a batch of inputs. This operation
    results in an output of size self.output_size and a new state.

    Cells are blueprints: their parameters are not created when the cell
    object is constructed, but when `create_cell` is first called with the
    concrete shape of the inputs the cell will see. Later calls to
    `create_cell` reuse those parameters and only rebind the mode, so one
    cell can serve both a training and an inference graph. Calling a cell
    that was never created creates it from the static shape of its inputs.

    Every RNNCell must have the properties below and implement `call` with
    the signature `(inputs, state) -> (output, new_state)`.
    """

    def __init__(self, name=None):
        self._name = name or type(self).__name__
        self._mode = Mode.TRAINING
        self._built = False
        self._input_depth = None

    @property
    def name(self):
        """Name of the variable scope holding this cell's parameters."""
        return self._name

    @property
    def mode(self):
        return self._mode

    @property
    def built(self):
        return self._built

    @property
    def output_size(self):
        """Integer or structure of integers: size of outputs."""
        raise NotImplementedError("Abstract method")

    @property
    def state_size(self):
        """Integer or structure of integers: size of the state."""
        raise NotImplementedError("Abstract method")

    def build(self, input_shape):
        """Creates the parameters of this cell for inputs of `input_shape`."""
        pass

    def call(self, inputs, state):
        """Runs one step of this cell; must be implemented by subclasses."""
        raise NotImplementedError("Abstract method")

    def wrapped_cells(self, input_shape):
        """Returns `(scope, cell, input_shape)` for every cell this one runs.

        `scope` is the variable scope, relative to this cell's, in which the
        wrapped cell is created, or `None` to create it directly under this
        cell's scope.
        """
        return ()

    def create_cell(self, mode, input_shape):
        """Finalizes this cell for `mode` and inputs of shape `input_shape`.

        Parameters are created in a variable scope named after the cell,
        nested in the current variable scope, by the first call only. The
        input depth is bound by that call, while the mode is rebound by
        every call and applies to the ops built afterwards. Wrapped cells
        are created in turn with the same mode.

        Args:
            mode: one of `Mode.ALL`.
            input_shape: TensorShape (or list) of the inputs. Only the last
                dimension, the input depth, is used, so both full sequence
                shapes and single step shapes are accepted.

        Returns:
            This cell.

        Raises:
            ValueError: if the cell was already created for inputs of a
                different depth, or if `mode` is unknown.
        """
        Mode.validate(mode)
        input_shape = tf.TensorShape(input_shape)
        depth = _input_depth(input_shape)
        if self._built and depth != self._input_depth:
            raise ValueError(
                "Cell '{0}' was created for inputs of depth {1}, but is "
                "now used with inputs of depth {2}.".format(
                    self._name, self._input_depth, depth))
        self._mode = mode
        with tf.variable_scope(self._name):
            if not self._built:
                logging.vlog(1, "Creating cell '%s' (%s) for input depth %d.",
                             tf.get_variable_scope().name,
                             type(self).__name__, depth)
                self.build(input_shape)
            for scope, cell, cell_input_shape in self.wrapped_cells(input_shape):
                if scope is None:
                    cell.create_cell(mode, cell_input_shape)
                else:
                    with tf.variable_scope(scope):
                        cell.create_cell(mode, cell_input_shape)
        self._input_depth = depth
        self._built = True
        return self

    def __call__(self, inputs, state):
        """Run this RNN cell on inputs, starting from the given state.

        Args:
            inputs: 2D Tensor with shape [batch_size x input_depth].
            state: structure of 2D Tensors matching `self.state_size`.

        Returns:
            A `Tuple(output, new_state)`.
        """
        if not self._built:
            self.create_cell(self._mode, inputs.get_shape())
        with tf.name_scope(self._name):
            output, new_state = self.call(inputs, state)
        return Tuple(output, new_state)

    def forward(self, input_tuple):
        """Advances this cell on a `Tuple(input, state)`."""
        return self(input_tuple.output, input_tuple.state)

    def zero_state(self, batch_size, dtype):
        """Return a state structure filled with zeros.

        Args:
            batch_size: int or unit Tensor representing the batch size.
            dtype: the data type to use for the state.

        Returns:
            A structure matching `self.state_size` of 2D Tensors with shapes
            [batch_size x size], filled with zeros.
        """
        def _zeros(size):
            if isinstance(batch_size, int):
                return tf.zeros([batch_size, size], dtype=dtype)
            zeros = tf.zeros(tf.stack([batch_size, size]), dtype=dtype)
            # The reshape below is a no-op, but it allows shape inference of shape[1].
            return tf.reshape(zeros, [-1, size])

        with tf.name_scope(self._name + "ZeroState"):
            return tf.nest.map_structure(_zeros, self.state_size)


class BasicRNNCell(RNNCell):
    """The most basic RNN cell."""

    def __init__(self, num_units, activation=tf.tanh, name=None):
        super(BasicRNNCell, self).__init__(name)
        self._num_units = num_units
        self._activation = activation

    @property
    def output_size(self):
        return self._num_units

    @property
    def state_size(self):
        return self._num_units

    def build(self, input_shape):
        self._matrix, self._bias = linear_parameters(
            _input_depth(input_shape) + self._num_units, self._num_units)

    def call(self, inputs, state):
        """Most basic RNN: output = new_state = tanh(W * input + U * state + B)."""
        output = self._activation(linear([inputs, state], self._matrix, self._bias))
        return output, output


class GRUCell(RNNCell):
    """Gated Recurrent Unit cell (cf. http://arxiv.org/abs/1406.1078)."""

    def __init__(self, num_units, activation=tf.tanh, name=None):
        super(GRUCell, self).__init__(name)
        self._num_units = num_units
        self._activation = activation

    @property
    def output_size(self):
        return self._num_units

    @property
    def state_size(self):
        return self._num_units

    def build(self, input_shape):
        input_size = _input_depth(input_shape) + self._num_units
        with tf.variable_scope("Gates"):  # Reset gate and update gate.
            # We start with bias of 1.0 to not reset and not update.
            self._gate_matrix, self._gate_bias = linear_parameters(
                input_size, 2 * self._num_units, bias_start=1.0)
        with tf.variable_scope("Candidate"):
            self._candidate_matrix, self._candidate_bias = linear_parameters(
                input_size, self._num_units)

    def call(self, inputs, state):
        """Gated recurrent unit (GRU) with num_units cells."""
        r, u = tf.split(
            linear([inputs, state], self._gate_matrix, self._gate_bias), 2, axis=1)
        r, u = tf.sigmoid(r), tf.sigmoid(u)
        c = self._activation(linear([inputs, r * state],
                                    self._candidate_matrix,
                                    self._candidate_bias))
        new_h = u * state + (1 - u) * c
        return new_h, new_h


class BasicLSTMCell(RNNCell):
    """Basic LSTM recurrent network cell.

    The implementation is based on: http://arxiv.org/pdf/1409.2329v5.pdf.

    It does not allow cell clipping, a projection layer, and does not
    use peep-hole connections: it is the basic baseline.

    Biases of the forget gate are initialized by default to 1 in order to reduce
    the scale of forgetting in the beginning of the training.

    The state is an `LSTMState(c, h)`.
    """

    def __init__(self, num_units, forget_bias=1.0, activation=tf.tanh,
                 name=None):
        super(BasicLSTMCell, self).__init__(name)
        self._num_units = num_units
        self._forget_bias = forget_bias
        self._activation = activation

    @property
    def output_size(self):
        return self._num_units

    @property
    def state_size(self):
        return LSTMState(self._num_units, self._num_units)

    def build(self, input_shape):
        # Parameters of gates are concatenated into one multiply for efficiency.
        self._matrix, self._bias = linear_parameters(
            _input_depth(input_shape) + self._num_units, 4 * self._num_units)

    def call(self, inputs, state):
        """Long short-term memory cell (LSTM)."""
        c, h = state
        concat = linear([inputs, h], self._matrix, self._bias)

        # i = input_gate, j = new_input, f = forget_gate, o = output_gate
        i, j, f, o = tf.split(concat, 4, axis=1)

        new_c = (c * tf.sigmoid(f + self._forget_bias) +
                 tf.sigmoid(i) * self._activation(j))
        new_h = self._activation(new_c) * tf.sigmoid(o)
        return new_h, LSTMState(new_c, new_h)


def _keeps_everything(keep_prob):
    return isinstance(keep_prob, float) and keep_prob >= 1.0


class DropoutWrapper(RNNCell):
    """Operator adding dropout to inputs and outputs of the given cell.

    Dropout is only applied when the cell is created in `Mode.TRAINING` and
    is never used on the state.
    """

    def __init__(self, cell, input_keep_prob=1.0, output_keep_prob=1.0,
                 seed=None, name="DropoutWrapper"):
        """Create a cell with added input and/or output dropout.

        Args:
            cell: an RNNCell.
            input_keep_prob: unit Tensor or float between 0 and 1, input keep
                probability; if it is float and 1, no input dropout will be added.
            output_keep_prob: unit Tensor or float between 0 and 1, output keep
                probability; if it is float and 1, no output dropout will be added.
            seed: (optional) integer, the randomness seed.
            name: name of the variable scope wrapping `cell`.

        Raises:
            TypeError: if cell is not an RNNCell.
            ValueError: if keep_prob is not between 0 and 1.
        """
        if not isinstance(cell, RNNCell):
            raise TypeError("The parameter cell is not a RNNCell.")
        for keep_prob in (input_keep_prob, output_keep_prob):
            if (isinstance(keep_prob, float) and
                    not 0.0 <= keep_prob <= 1.0):
                raise ValueError("Keep probabilities must be between 0 and 1: "
                                 "{0}".format(keep_prob))
        super(DropoutWrapper, self).__init__(name)
        self._cell = cell
        self._input_keep_prob = input_keep_prob
        self._output_keep_prob = output_keep_prob
        self._seed = seed

    @property
    def output_size(self):
        return self._cell.output_size

    @property
    def state_size(self):
        return self._cell.state_size

    def wrapped_cells(self, input_shape):
        return [(None, self._cell, input_shape)]

    def call(self, inputs, state):
        """Run the cell with the declared dropouts."""
        training = Mode.is_training(self.mode)
        if training and not _keeps_everything(self._input_keep_prob):
            inputs = tf.nn.dropout(inputs, keep_prob=self._input_keep_prob,
                                   seed=self._seed)
        output, new_state = self._cell(inputs, state)
        if training and not _keeps_everything(self._output_keep_prob):
            output = tf.nn.dropout(output, keep_prob=self._output_keep_prob,
                                   seed=self._seed)
        return output, new_state


class StackedCell(RNNCell):
    """RNN cell that is composed by applying a sequence of RNN cells in order.

    This means that the output of each cell is fed to the next one as input,
    while the states remain separate. The state of a stacked cell is the
    tuple of the states of its cells, in the same order as the cells.

    Note that this class does no variable management beyond placing the
    parameters of cell `i` under the variable scope `Cell<i>`. Variable
    sharing should be handled based on the cells the caller provides: passing
    the same cell object twice shares its parameters, and fails on creation if
    the two positions see inputs of different depth.
    """

    def __init__(self, cells, name="StackedCell"):
        """Create a cell composed sequentially of a number of RNNCells.

        Args:
            cells: list of RNNCells that will be composed in this order.
            name: name prefix used for all new ops.

        Raises:
            TypeError: if some element of `cells` is not an RNNCell.
            ValueError: if cells is empty.
        """
        cells = tuple(cells)
        if not cells:
            raise ValueError("Must specify at least one cell for StackedCell.")
        for cell in cells:
            if not isinstance(cell, RNNCell):
                raise TypeError("StackedCell expects RNNCells, got {0!r}.".format(
                    cell))
        super(StackedCell, self).__init__(name)
        self._cells = cells

    @property
    def cells(self):
        return self._cells

    @property
    def output_size(self):
        return self._cells[-1].output_size

    @property
    def state_size(self):
        return tuple(cell.state_size for cell in self._cells)

    def wrapped_cells(self, input_shape):
        wrapped = []
        for i, cell in enumerate(self._cells):
            wrapped.append(("Cell%d" % i, cell, input_shape))
            input_shape = input_shape[:-1].concatenate(
                tf.TensorShape([cell.output_size]))
        return wrapped

    def __call__(self, inputs, state):
        if (not isinstance(state, (tuple, list)) or
                len(state) != len(self._cells)):
            raise ValueError(
                "StackedCell '{0}' has {1} cells, but was given a state of {2}."
                .format(self._name, len(self._cells), state))
        return super(StackedCell, self).__call__(inputs, state)

    def call(self, inputs, state):
        """Run this multi-layer cell on inputs, starting from state."""
        current_input = inputs
        new_states = []
        for cell, cell_state in zip(self._cells, state):
            current_input, new_state = cell(current_input, cell_state)
            new_states.append(new_state)
        return current_input, tuple(new_states)
