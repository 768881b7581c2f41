# api/odontogram/services/captura_diagnostico.py
"""
Flujo de captura de diagnóstico para una pieza (o rango de piezas).

Estados:
    CERRADO  --abrir-->  ABIERTO  --enviar-->  ENVIANDO
    ENVIANDO --guardado OK-->      CERRADO   (registro agregado al store)
    ENVIANDO --error al guardar-->  ABIERTO  (estado conservado para reintentar)
    ABIERTO  --cancelar-->         CERRADO   (sin efectos)

Los errores de validación dejan el flujo en ABIERTO. Una vez iniciado el
guardado no se puede cancelar.
"""
import logging
from decimal import Decimal, InvalidOperation

from django.core.exceptions import ValidationError
from django.utils import timezone

from api.odontogram.constants import (
    EstadoTratamiento,
    FDIConstants,
    Superficie,
    TipoCondicion,
    normalizar_superficies,
)
from api.odontogram.exceptions import FlujoCapturaError, PersistenciaError
from api.odontogram.models import CondicionDental
from api.odontogram.services.notificaciones import NotificadorLog
from api.odontogram.validators.validator_fdi import validar_rango

logger = logging.getLogger(__name__)

MENSAJE_SUPERFICIES = 'Selecciona al menos una superficie'
MENSAJE_TRATAMIENTO = 'Selecciona un tratamiento'
MENSAJE_GUARDADO_OK = 'Diagnóstico guardado correctamente'
MENSAJE_ERROR_GUARDADO = 'No se pudo guardar el diagnóstico. Intenta nuevamente.'


class EstadoFlujo:
    CERRADO = 'cerrado'
    ABIERTO = 'abierto'
    ENVIANDO = 'enviando'


class CapturaDiagnostico:

    LONGITUD_MINIMA_TIPO = 2

    def __init__(self, odontograma, store, persistencia, notificador=None,
                 odontologo=None, ip_creacion=None, reloj=timezone.now):
        """
        Args:
            odontograma: Odontograma dueño de los registros.
            store: CondicionStore de la sesión.
            persistencia: colaborador con `guardar_condicion(condicion)`.
            notificador: Notificador (info/success/warning/error). Sin él,
                los mensajes van al log.
            odontologo: usuario que queda asociado al registro.
            reloj: callable que retorna el instante actual.
        """
        self.odontograma = odontograma
        self._store = store
        self._persistencia = persistencia
        self._notificador = notificador if notificador is not None else NotificadorLog()
        self._odontologo = odontologo
        self._ip_creacion = ip_creacion
        self._reloj = reloj
        self._reiniciar()

    # ── Transiciones ───────────────────────────────────────────────────────

    def abrir(self, numero_diente, superficies_por_defecto=(), diente_fin_rango=None):
        if self.estado_flujo != EstadoFlujo.CERRADO:
            raise FlujoCapturaError("Ya existe un diagnóstico en edición")

        if not FDIConstants.es_posicion_valida(numero_diente):
            raise ValidationError({
                'numero_diente': [f"'{numero_diente}' no es una posición dental FDI válida"]
            })
        if diente_fin_rango is not None:
            try:
                validar_rango(numero_diente, diente_fin_rango)
            except ValidationError as e:
                raise ValidationError({'diente_fin_rango': e.messages})

        self.numero_diente = numero_diente
        self.diente_fin_rango = diente_fin_rango
        self.superficies = {s for s in superficies_por_defecto if s in Superficie.values}
        self.estado_flujo = EstadoFlujo.ABIERTO
        logger.debug(f"Captura abierta para la pieza {numero_diente}")

    def alternar_superficie(self, superficie):
        self._exigir_abierto()
        if superficie not in Superficie.values:
            raise ValidationError({'superficies': [f"Superficie no reconocida: {superficie}"]})
        # Diferencia simétrica: agrega si no está, quita si está
        self.superficies ^= {superficie}

    def seleccionar_condicion(self, tipo_condicion):
        self._exigir_abierto()
        self.tipo_condicion = tipo_condicion

    def seleccionar_estado(self, estado):
        self._exigir_abierto()
        if estado not in EstadoTratamiento.values:
            raise ValidationError({'estado': [f"Estado no reconocido: {estado}"]})
        self.estado = estado

    def escribir_notas(self, notas):
        self._exigir_abierto()
        self.notas = notas or None

    def fijar_costo(self, costo):
        self._exigir_abierto()
        if costo in (None, ''):
            self.costo = None
            return
        try:
            valor = Decimal(str(costo))
        except InvalidOperation:
            raise ValidationError({'costo': ["El importe no es un número válido"]})
        if not valor.is_finite() or valor < 0:
            raise ValidationError({'costo': ["El importe no puede ser negativo"]})
        self.costo = valor

    def enviar(self):
        """
        Valida, persiste y agrega al store. Retorna la condición guardada.

        Raises:
            ValidationError: con el campo que falló; el flujo sigue abierto.
            PersistenciaError: el guardado fue rechazado; el flujo sigue abierto
                con los datos intactos y el store sin cambios.
            Cualquier otro error del colaborador deja el flujo igual de abierto
                y se propaga tras notificar.
        """
        self._exigir_abierto()

        errores = self._validar()
        if errores:
            self.errores = errores
            raise ValidationError(errores)

        condicion = self._construir_condicion()
        self.estado_flujo = EstadoFlujo.ENVIANDO
        self.errores = {}

        try:
            guardada = self._persistencia.guardar_condicion(condicion)
        except PersistenciaError as e:
            self.estado_flujo = EstadoFlujo.ABIERTO
            self.errores = {'__all__': [MENSAJE_ERROR_GUARDADO]}
            logger.warning(
                f"Guardado rechazado para pieza {self.numero_diente} "
                f"del odontograma {self.odontograma.id}: {e.motivo}"
            )
            self._notificador.error(MENSAJE_ERROR_GUARDADO)
            raise
        except Exception as e:
            self.estado_flujo = EstadoFlujo.ABIERTO
            self.errores = {'__all__': [MENSAJE_ERROR_GUARDADO]}
            logger.error(
                f"Error inesperado guardando pieza {self.numero_diente} "
                f"del odontograma {self.odontograma.id}: {e}",
                exc_info=True
            )
            self._notificador.error(MENSAJE_ERROR_GUARDADO)
            raise

        self._store.agregar(guardada)
        logger.info(
            f"Condición {guardada.tipo_condicion} registrada en pieza "
            f"{guardada.descriptor_diente} (odontograma {self.odontograma.id})"
        )
        self._reiniciar()
        self._notificador.success(MENSAJE_GUARDADO_OK)
        return guardada

    def cancelar(self):
        if self.estado_flujo == EstadoFlujo.ENVIANDO:
            raise FlujoCapturaError("No se puede cancelar un guardado en curso")
        self._reiniciar()

    # ── Consultas ──────────────────────────────────────────────────────────

    @property
    def esta_abierto(self):
        return self.estado_flujo == EstadoFlujo.ABIERTO

    def datos(self):
        return {
            'estado_flujo': self.estado_flujo,
            'numero_diente': self.numero_diente,
            'diente_fin_rango': self.diente_fin_rango,
            'superficies': normalizar_superficies(self.superficies),
            'tipo_condicion': self.tipo_condicion,
            'estado': self.estado,
            'notas': self.notas,
            'costo': self.costo,
            'errores': self.errores,
        }

    # ── Internos ───────────────────────────────────────────────────────────

    def _reiniciar(self):
        self.estado_flujo = EstadoFlujo.CERRADO
        self.numero_diente = None
        self.diente_fin_rango = None
        self.superficies = set()
        self.tipo_condicion = None
        self.estado = EstadoTratamiento.PLANIFICADO
        self.notas = None
        self.costo = None
        self.errores = {}

    def _exigir_abierto(self):
        if self.estado_flujo != EstadoFlujo.ABIERTO:
            raise FlujoCapturaError(f"Operación no permitida en estado '{self.estado_flujo}'")

    def _validar(self):
        errores = {}
        if not self.superficies:
            errores['superficies'] = [MENSAJE_SUPERFICIES]

        tipo = (self.tipo_condicion or '').strip()
        if len(tipo) < self.LONGITUD_MINIMA_TIPO:
            errores['tipo_condicion'] = [MENSAJE_TRATAMIENTO]
        elif tipo not in TipoCondicion.values:
            errores['tipo_condicion'] = [f"Condición no reconocida: {tipo}"]
        return errores

    def _fecha_creacion(self):
        # No retrocede respecto del último registro de la misma pieza
        fecha = self._reloj()
        ultima = self._store.ultima_de(self.numero_diente)
        if ultima is not None and ultima.fecha_creacion and fecha < ultima.fecha_creacion:
            fecha = ultima.fecha_creacion
        return fecha

    def _construir_condicion(self):
        return CondicionDental(
            odontograma=self.odontograma,
            numero_diente=self.numero_diente,
            diente_fin_rango=self.diente_fin_rango,
            superficies=normalizar_superficies(self.superficies),
            tipo_condicion=self.tipo_condicion.strip(),
            estado=self.estado,
            notas=self.notas or '',
            costo=self.costo,
            fecha_creacion=self._fecha_creacion(),
            odontologo=self._odontologo,
            ip_creacion=self._ip_creacion,
        )
