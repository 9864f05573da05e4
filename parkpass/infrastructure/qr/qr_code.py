from io import BytesIO

import qrcode

from parkpass.application.gateways import AbstractQrCodeRenderer


class QrCodeRenderer(AbstractQrCodeRenderer):
    def __init__(self, box_size: int = 10, border: int = 4):
        self.box_size = box_size
        self.border = border

    def render_png(self, data: str) -> bytes:
        qr = qrcode.QRCode(box_size=self.box_size, border=self.border)
        qr.add_data(data)
        qr.make(fit=True)
        img = qr.make_image(fill_color="black", back_color="white")

        buffer = BytesIO()
        img.save(buffer)
        return buffer.getvalue()
