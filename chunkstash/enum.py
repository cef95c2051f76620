from enum import Flag


class Compliant(Flag):
    '''It indicates which degree of compliantness the data must reflect the format'''
    NONE     = 0
    MAGIC    = 1 << 0
    RESERVED = 1 << 1
