"""
A collection of examples illustrating some use cases for pseudoblockarray
"""

import numpy as np

import pseudoblockarray as pba

## Assembling a block Jacobian
# The residual of a coupled problem has 'u' (2 unknowns) and 'p' (1 unknown)
# components; the Jacobian is partitioned accordingly along both axes
labels = (('u', 'p'), ('u', 'p'))
J = pba.zeros([2, 1], [2, 1], labels=labels)

J.blocks['u', 'u'] = np.array([[4.0, 1.0], [1.0, 3.0]])
J.blocks['u', 'p'] = np.array([[1.0], [2.0]])
J.blocks['p', 'u'] = np.array([[1.0, 2.0]])
J.blocks['p', 'p'] = np.array([[-1.0]])
print(J)

## Passing the monolithic array to a direct solver is instant
r = np.array([1.0, 2.0, 3.0])
dx = np.linalg.solve(J.to_mono_ndarray(), r)

## Wrapping an existing array
# The wrapped array is shared, not copied
x = pba.PseudoBlockArray(dx, [2, 1], labels=(('u', 'p'),))
x.blocks['p'] = np.array([0.0])
assert dx[2] == 0.0
