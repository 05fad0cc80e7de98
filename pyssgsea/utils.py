'''Utility functions used in other modules.'''

# Built-ins
from collections.abc import Iterable
import os


def makedirs(folder_name=None):
    '''
    Creates a folder if it does not exist.

    Parameters
    ----------
    folder_name : str, optional

    Returns
    -------
    folder_name : str
    '''
    if folder_name:
        os.makedirs(folder_name, exist_ok=True)

    return folder_name


def flatten_set(lst):
    '''
    Flattens an Iterable with arbitrary nesting into a single set.

    Strings and bytes are treated as single elements rather than iterated
    over.

    Parameters
    ----------
    lst : Iterable

    Returns
    -------
    flattened : set

    Examples
    --------
        >>> utils.flatten_set(['Gfap', ['Aqp4', 'Aldh1l1'], [['Gfap']]])
        {'Gfap', 'Aqp4', 'Aldh1l1'}
    '''
    if isinstance(lst, Iterable) and not isinstance(lst, (str, bytes)):
        ret = set()

        for element in lst:
            for new_element in flatten_set(element):
                ret.add(new_element)

        return ret

    return set([lst])
