import logging


class Dependency:
    '''This makes the relation between fields possible.

    In practice this class allows to write something like

        class Simple(Chunk):
            length = fields.StructField('I')
            data = fields.StringField(Dependency('.length'))

    and have the length of the string contained in the field named 'data'
    strictly connected to the field named 'length'.

    The relation is defined in one direction (for unpacking: the length is
    read from the sibling) and is reversed during the relayouting (the sibling
    is set from the actual length of the string).

    The leading '.' indicates that the field is at the same level, it's the
    only resolution supported.
    '''
    def __init__(self, expression):
        if not expression.startswith('.'):
            raise ValueError(f"only sibling dependencies are supported, '{expression}' doesn't start with '.'")

        self.expression = expression
        self.logger = logging.getLogger(__name__)

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.expression})>'

    @property
    def field_name(self) -> str:
        return self.expression[1:]

    def resolve_field(self, father):
        return father.get_field(self.field_name)

    def resolve(self, father):
        '''With this method we resolve the attribute with respect to the instance
        passed as argument.'''
        value = father.get_value(self.field_name)
        self.logger.debug(' resolved \'%s\' with value %s' % (self.expression, value))

        return value

    def resolve_and_set(self, father, value):
        '''Write back the value into the sibling, checking it fits.'''
        field = self.resolve_field(father)
        field.check(value)
        father.set_value(self.field_name, value)
