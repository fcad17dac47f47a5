"""
Utilities for reading/writing PseudoBlockArray objects to hdf5

The backing array is stored as a single dataset; the block partition and block
labels are stored as attributes of the dataset.
"""

import logging

import numpy as np

from . import _HAS_H5PY, require_h5py
if _HAS_H5PY:
    import h5py
else:
    h5py = None

from .pseudoblockarray import PseudoBlockArray
from .blocksizes import BlockSizes

logger = logging.getLogger(__name__)


def _decode(label) -> str:
    if isinstance(label, bytes):
        return label.decode('utf-8')
    return str(label)

@require_h5py
def write_pseudo_block_array(
        f: 'h5py.Group', name: str, barray: PseudoBlockArray, dataset_kwargs=None
    ) -> 'h5py.Dataset':
    """
    Write a pseudo block array to a dataset

    Parameters
    ----------
    f: h5py.Group
        The group to create the dataset in
    name: str
        The name of the dataset
    barray: PseudoBlockArray
        The array to write
    dataset_kwargs: dict
        Additional keyword arguments for `h5py.Group.create_dataset`

    Returns
    -------
    h5py.Dataset
        The created dataset
    """
    if dataset_kwargs is None:
        dataset_kwargs = {}

    logger.debug(
        "Writing %s array with blocks %s to dataset %r",
        barray.shape, barray.bshape, name
    )
    dset = f.create_dataset(name, data=barray.to_mono_ndarray(), **dataset_kwargs)

    # Store the block partition and labels along each axis
    dset.attrs.create('pseudoblockarray_dim', barray.ndim)
    for naxis, (axis_sizes, axis_labels) in enumerate(zip(barray.bshape, barray.labels)):
        dset.attrs.create(f'pseudoblockarray_axis{naxis}_sizes', np.array(axis_sizes))
        if len(axis_labels) > 0:
            dset.attrs.create(
                f'pseudoblockarray_axis{naxis}_labels', list(axis_labels),
                dtype=h5py.string_dtype()
            )
    return dset

@require_h5py
def read_block_sizes(dset: 'h5py.Dataset') -> BlockSizes:
    """
    Read the block partition stored with a dataset
    """
    ndim = int(dset.attrs['pseudoblockarray_dim'])
    axis_sizes = [
        [int(size) for size in dset.attrs[f'pseudoblockarray_axis{naxis}_sizes']]
        for naxis in range(ndim)
    ]
    labels = [
        tuple(_decode(label) for label in dset.attrs[f'pseudoblockarray_axis{naxis}_labels'])
        if f'pseudoblockarray_axis{naxis}_labels' in dset.attrs else ()
        for naxis in range(ndim)
    ]
    return BlockSizes(*axis_sizes, labels=labels)

@require_h5py
def read_pseudo_block_array(f: 'h5py.Group', name: str, load=True) -> PseudoBlockArray:
    """
    Read a pseudo block array from a dataset

    Parameters
    ----------
    f: h5py.Group
        The group containing the dataset
    name: str
        The name of the dataset
    load: bool
        If `True`, the dataset is read into a `np.ndarray`. Otherwise, the
        returned array is backed by the `h5py.Dataset` itself, so element and
        block reads/writes go directly to the file (and the file must stay
        open while the array is used).
    """
    dset = f[name]
    block_sizes = read_block_sizes(dset)

    logger.debug(
        "Reading %s array with blocks %s from dataset %r (load=%s)",
        dset.shape, block_sizes.bshape, name, load
    )
    if load:
        # `dset[...]` returns an ndarray even for scalar (0-d) datasets
        return PseudoBlockArray._from_owned_storage(dset[...], block_sizes)
    else:
        return PseudoBlockArray(dset, block_sizes)
