## 4x4 affine/projective transformation matrices for csg2gltf

## Copyright (c) 2020 Richard W. DeVaul
## Copyright (c) 2020 yapCAD contributors
## All rights reserved

# Permission is hereby granted, free of charge, to any person
# obtaining a copy of this software and associated documentation files
# (the "Software"), to deal in the Software without restriction,
# including without limitation the rights to use, copy, modify, merge,
# publish, distribute, sublicense, and/or sell copies of the Software,
# and to permit persons to whom the Software is furnished to do so,
# subject to the following conditions:
#
# The above copyright notice and this permission notice shall be
# included in all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND,
# EXPRESS OR IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF
# MERCHANTABILITY, FITNESS FOR A PARTICULAR PURPOSE AND
# NONINFRINGEMENT. IN NO EVENT SHALL THE AUTHORS OR COPYRIGHT HOLDERS
# BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER LIABILITY, WHETHER IN AN
# ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN
# CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

import math

## a matrix is stored as a list of four rows.  Modeling engines and
## glTF both hand matrices around as flat lists of 16 numbers in
## column-major order, so that is what the flat constructor form
## expects: entries 0-3 are the first column, 12-14 the translation.
## Points are treated as column vectors, so apply() computes M.[x,y,z,1].


class Matrix:
    """4x4 transformation matrix for homogeneous 3D coordinates"""

    def __init__(self, a=None):
        self.m = [[1.0, 0.0, 0.0, 0.0],
                  [0.0, 1.0, 0.0, 0.0],
                  [0.0, 0.0, 1.0, 0.0],
                  [0.0, 0.0, 0.0, 1.0]]

        if a is None:
            return
        if isinstance(a, Matrix):
            self.m = [list(row) for row in a.m]
            return
        if not isinstance(a, (tuple, list)):
            try:
                a = list(a)
            except TypeError:
                raise ValueError('bad thing used in attempt to initialize matrix: {}'.format(a))

        if len(a) == 4 and all(isinstance(r, (tuple, list)) and len(r) == 4 for r in a):
            for i in range(4):
                for j in range(4):
                    self.m[i][j] = self._element(a[i][j])
        elif len(a) == 16:
            for j in range(4):
                for i in range(4):
                    self.m[i][j] = self._element(a[j * 4 + i])
        else:
            raise ValueError('matrix needs 4x4 rows or 16 column-major entries, got {} entries'.format(len(a)))

    @staticmethod
    def _element(x):
        try:
            x = float(x)
        except (TypeError, ValueError):
            raise ValueError('bad element in matrix initialization: {}'.format(x))
        if not math.isfinite(x):
            raise ValueError('bad element in matrix initialization: {}'.format(x))
        return x

    def __repr__(self):
        return "Matrix({},{},{},{})".format(self.m[0], self.m[1],
                                            self.m[2], self.m[3])

    def __eq__(self, other):
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.m == other.m

    def is_identity(self):
        return self.m == Matrix().m

    def to_list(self):
        """Return the 16 entries in column-major order."""
        return [self.m[i][j] for j in range(4) for i in range(4)]

    def apply(self, p):
        """Transform the point ``p`` and return an ``(x, y, z)`` tuple.

        A homogeneous result with ``w`` other than 0 or 1 is divided
        through by ``w``.
        """
        x, y, z = float(p[0]), float(p[1]), float(p[2])
        m = self.m
        nx = m[0][0] * x + m[0][1] * y + m[0][2] * z + m[0][3]
        ny = m[1][0] * x + m[1][1] * y + m[1][2] * z + m[1][3]
        nz = m[2][0] * x + m[2][1] * y + m[2][2] * z + m[2][3]
        w = m[3][0] * x + m[3][1] * y + m[3][2] * z + m[3][3]
        if w != 0.0 and w != 1.0:
            return (nx / w, ny / w, nz / w)
        return (nx, ny, nz)


def transform_from(value):
    """Return a ``Matrix`` for a flat transform field.

    ``None`` or anything that is not a sequence of exactly 16 entries
    means no transform, and yields the identity.
    """
    if isinstance(value, Matrix):
        return value
    if value is None or isinstance(value, (str, bytes)):
        return Matrix()
    try:
        if len(value) != 16:
            return Matrix()
    except TypeError:
        return Matrix()
    return Matrix(list(value))


def Translation(delta):
    dx, dy, dz = delta[0], delta[1], delta[2]
    T = [[1, 0, 0, dx],
         [0, 1, 0, dy],
         [0, 0, 1, dz],
         [0, 0, 0, 1]]
    return Matrix(T)
