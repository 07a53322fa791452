class KPIWidgetError(Exception):
    pass


class MaskLengthMismatchError(KPIWidgetError):
    def __init__(self, mask_name: str, mask_length: int | None, data_length: int):
        self.mask_name = mask_name
        self.mask_length = mask_length
        self.data_length = data_length
        found = 'missing' if mask_length is None else f'of length {mask_length}'
        super().__init__(
            f'Group mask {mask_name} is {found}, but comparison mode needs one entry per data row '
            f'({data_length} rows).'
        )


class UnknownComparisonError(KPIWidgetError):
    pass


class InvalidPayloadError(KPIWidgetError):
    pass
